"""Location models shared by every stage of the resolution pipeline."""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from mapsbridge.core.errors import InvalidCoordinateError

# Plain decimal, optionally in the exponent form float repr uses for tiny values.
# Rules out the nan, inf and 1_0 spellings float() would also take.
DECIMAL_TOKEN = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


class ProviderId(str, Enum):
    """Map services whose links can be resolved.

    The value doubles as the display name used in metrics and API output.
    """

    GOOGLE = "google"
    APPLE = "apple"
    BING = "bing"
    WAZE = "waze"
    OPENSTREETMAP = "osm"
    KOMOOT = "komoot"

    @property
    def display_name(self) -> str:
        """Human readable provider name."""
        return self.value


class Coordinate(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")

    def is_valid(self) -> bool:
        """Check the pair lies within the WGS84 ranges."""
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lon <= 180.0

    @classmethod
    def from_string(cls, value: str) -> "Coordinate":
        """Parse a "lat,lon" or "lat lon" string.

        Args:
            value: Text holding two numbers separated by a comma or whitespace

        Returns:
            Coordinate: Parsed coordinate (not range checked)

        Raises:
            InvalidCoordinateError: If the text does not hold exactly two numbers
        """
        if value is None:
            raise InvalidCoordinateError("Coordinates are required")

        text = value.strip()
        parts = text.split(",") if "," in text else text.split()
        if len(parts) != 2:
            raise InvalidCoordinateError(
                f"Invalid coordinate format: '{value}'. Expected 'lat,lon'"
            )

        tokens = [part.strip() for part in parts]
        if not all(DECIMAL_TOKEN.fullmatch(token) for token in tokens):
            raise InvalidCoordinateError(f"Invalid coordinate values: '{value}'")

        return cls(lat=float(tokens[0]), lon=float(tokens[1]))

    def __str__(self) -> str:
        return f"{self.lat},{self.lon}"


class LocationResult(BaseModel):
    """What a pipeline stage learned about a location.

    A result with every field unset is the "nothing found" state and is not
    an error. Results are immutable; stages hand each other modified copies.
    """

    model_config = ConfigDict(frozen=True)

    map_source: ProviderId | None = Field(
        None, description="Provider whose link produced this result"
    )
    original_url: str | None = Field(None, description="Input the result came from")
    coordinates: Coordinate | None = None
    address: str | None = Field(None, description="Human readable address")
    place_name: str | None = Field(None, description="Name of the point of interest")

    @classmethod
    def empty(cls) -> "LocationResult":
        return cls()

    @classmethod
    def from_coordinates(cls, coordinates: Coordinate | None) -> "LocationResult":
        return cls(coordinates=coordinates)

    @classmethod
    def from_coordinates_and_address(
        cls, coordinates: Coordinate | None, address: str | None
    ) -> "LocationResult":
        return cls(coordinates=coordinates, address=address)

    @classmethod
    def from_coordinates_address_and_name(
        cls,
        coordinates: Coordinate | None,
        address: str | None,
        place_name: str | None,
    ) -> "LocationResult":
        return cls(coordinates=coordinates, address=address, place_name=place_name)

    def is_empty(self) -> bool:
        return (
            self.map_source is None
            and self.original_url is None
            and self.coordinates is None
            and self.address is None
            and self.place_name is None
        )

    def has_valid_coordinates(self) -> bool:
        return self.coordinates is not None and self.coordinates.is_valid()

    def has_valid_address(self) -> bool:
        return bool(self.address and self.address.strip())

    def has_valid_place_name(self) -> bool:
        return bool(self.place_name and self.place_name.strip())

    def with_source(
        self, map_source: ProviderId | None, original_url: str | None
    ) -> "LocationResult":
        """Copy of this result tagged with where it came from."""
        return self.model_copy(
            update={"map_source": map_source, "original_url": original_url}
        )

    def with_address(self, address: str | None) -> "LocationResult":
        return self.model_copy(update={"address": address})


class CallerIdentity(BaseModel):
    """Who asked for a resolution.

    Resolved by the transport layer (client IP, headers) and handed to the
    resolver explicitly; used for log context only.
    """

    model_config = ConfigDict(frozen=True)

    ip: str | None = None
    email: str | None = None
    chat_id: str | None = None

    def log_context(self) -> dict[str, str]:
        """Non-empty identity fields, keyed for structured logging."""
        context = {
            "client_ip": self.ip,
            "client_email": self.email,
            "client_chat_id": self.chat_id,
        }
        return {key: value for key, value in context.items() if value}
