"""Google geocoding backend.

Reverse and forward geocoding go through geopy's GoogleV3 geocoder. Place
identifiers are resolved with the Places Details API, which geopy does not
wrap, using plain requests.
"""

import logging
from typing import Any

import requests
from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.geocoders import GoogleV3

from mapsbridge.core.geocoding.base import GeocodingBackend, text_field
from mapsbridge.core.geocoding.cache import GeocodingCache
from mapsbridge.models.location import Coordinate, LocationResult

logger = logging.getLogger(__name__)

GOOGLE_PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place"
PLACE_DETAILS_FIELDS = "geometry,formatted_address,name"
PLACE_GEOMETRY_FIELDS = "geometry"


class GoogleGeocodingService(GeocodingBackend):
    """Geocoding backend for the Google Maps Platform."""

    name = "google"

    def __init__(
        self,
        api_key: str | None = None,
        enabled: bool = True,
        places_base_url: str = GOOGLE_PLACES_BASE_URL,
        timeout: float = 2.0,
        session: requests.Session | None = None,
        cache: GeocodingCache | None = None,
    ):
        """Initialize the Google backend.

        Args:
            api_key: Google Maps Platform key
            enabled: Configuration switch; ignored (treated as off) without a key
            places_base_url: Places API root, overridable for testing
            timeout: Per-request timeout in seconds
            session: Optional requests session for Places calls
            cache: Optional result cache
        """
        super().__init__(enabled=False, cache=cache)
        self.api_key = api_key
        self.places_base_url = places_base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.geocoder: GoogleV3 | None = None

        if enabled:
            self._init_google()

    def _init_google(self) -> None:
        """Initialize the GoogleV3 geocoder."""
        if not self.api_key:
            logger.warning("Google API enabled but no API key configured, disabling")
            return

        try:
            self.geocoder = GoogleV3(api_key=self.api_key, timeout=self.timeout)
            self.enabled = True
            logger.info(f"Google geocoder initialized with {self.timeout}s timeout")
        except Exception as e:
            logger.error(f"Failed to initialize Google geocoder: {e}")
            self.geocoder = None
            self.enabled = False

    def reverse_geocode(self, coordinate: Coordinate) -> LocationResult:
        """Reverse geocode coordinates to a formatted address.

        Args:
            coordinate: Coordinates to look up

        Returns:
            LocationResult with the address, or coordinates only if not found
        """
        if not self.enabled or self.geocoder is None:
            return LocationResult.from_coordinates(coordinate)
        if coordinate is None or not coordinate.is_valid():
            return LocationResult.from_coordinates(coordinate)

        query = str(coordinate)
        cached = self._cached("reverse", query)
        if cached:
            return cached

        try:
            location = self.geocoder.reverse(
                (coordinate.lat, coordinate.lon), exactly_one=True
            )
        except (GeocoderTimedOut, GeocoderUnavailable, GeocoderServiceError) as e:
            logger.warning(f"Google reverse geocoding failed for {query}: {e}")
            return LocationResult.from_coordinates(coordinate)
        except Exception as e:
            logger.error(f"Unexpected Google error reverse geocoding {query}: {e}")
            return LocationResult.from_coordinates(coordinate)

        address = text_field(location.address) if location else None
        if address is None:
            return LocationResult.from_coordinates(coordinate)

        result = LocationResult.from_coordinates_and_address(coordinate, address)
        self._store("reverse", query, result)
        return result

    def forward_geocode(self, query: str) -> LocationResult | None:
        """Forward geocode free text to coordinates.

        Args:
            query: Address or place text

        Returns:
            LocationResult with coordinates and address, or None if not found
        """
        if not self.enabled or self.geocoder is None:
            return None
        if not query or not query.strip():
            return None

        cached = self._cached("forward", query)
        if cached:
            return cached

        try:
            location = self.geocoder.geocode(query, exactly_one=True)
        except (GeocoderTimedOut, GeocoderUnavailable, GeocoderServiceError) as e:
            logger.warning(f"Google geocoding failed for '{query[:50]}...': {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected Google error for '{query[:50]}...': {e}")
            return None

        if not location:
            return None

        result = LocationResult.from_coordinates_and_address(
            Coordinate(lat=location.latitude, lon=location.longitude),
            text_field(location.address),
        )
        self._store("forward", query, result)
        return result

    def _place_details(self, place_id: str, fields: str) -> dict[str, Any] | None:
        """Call the Places Details API.

        Args:
            place_id: Google place identifier
            fields: Comma separated field mask

        Returns:
            The ``result`` object of a successful response, or None
        """
        try:
            response = self.session.get(
                f"{self.places_base_url}/details/json",
                params={"place_id": place_id, "fields": fields, "key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Google place details request failed for {place_id}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Google place details returned malformed JSON: {e}")
            return None

        status = payload.get("status") if isinstance(payload, dict) else None
        if status != "OK":
            logger.debug(f"Google place details status {status} for {place_id}")
            return None

        result = payload.get("result")
        return result if isinstance(result, dict) else None

    @staticmethod
    def _geometry_coordinate(details: dict[str, Any]) -> Coordinate | None:
        try:
            location = details["geometry"]["location"]
            coordinate = Coordinate(lat=float(location["lat"]), lon=float(location["lng"]))
        except (KeyError, TypeError, ValueError):
            return None
        return coordinate if coordinate.is_valid() else None

    def get_place_coordinates(self, place_id: str) -> Coordinate | None:
        """Resolve a place ID to coordinates only.

        Requests nothing but geometry, the cheapest Places field mask.

        Args:
            place_id: Google place identifier

        Returns:
            Coordinate or None
        """
        if not self.enabled or not place_id:
            return None

        details = self._place_details(place_id, PLACE_GEOMETRY_FIELDS)
        return self._geometry_coordinate(details) if details else None

    def get_location_from_place_id(self, place_id: str) -> LocationResult | None:
        """Resolve a place ID to coordinates, address and name.

        Falls back to the geometry-only lookup when the full request fails.

        Args:
            place_id: Google place identifier

        Returns:
            LocationResult or None if the place cannot be resolved
        """
        if not self.enabled or not place_id or not place_id.strip():
            return None

        cached = self._cached("place", place_id)
        if cached:
            return cached

        details = self._place_details(place_id, PLACE_DETAILS_FIELDS)
        coordinate = self._geometry_coordinate(details) if details else None
        if coordinate is None:
            coordinate = self.get_place_coordinates(place_id)
            if coordinate is None:
                return None
            return LocationResult.from_coordinates(coordinate)

        result = LocationResult.from_coordinates_address_and_name(
            coordinate,
            text_field(details.get("formatted_address")),
            text_field(details.get("name")),
        )
        self._store("place", place_id, result)
        return result
