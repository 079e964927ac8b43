"""Radar.io geocoding backend.

Lightweight reverse and forward geocoding over Radar's REST API. Radar has
no notion of Google place identifiers, so place lookups are unsupported.
"""

import logging
from typing import Any

import requests

from mapsbridge.core.geocoding.base import GeocodingBackend, text_field
from mapsbridge.core.geocoding.cache import GeocodingCache
from mapsbridge.models.location import Coordinate, LocationResult

logger = logging.getLogger(__name__)

RADAR_API_BASE_URL = "https://api.radar.io/v1"
REVERSE_GEOCODE_ENDPOINT = "/geocode/reverse"
FORWARD_GEOCODE_ENDPOINT = "/geocode/forward"


class RadarGeocodingService(GeocodingBackend):
    """Geocoding backend for the Radar API."""

    name = "radar"

    def __init__(
        self,
        api_key: str | None = None,
        enabled: bool = False,
        base_url: str = RADAR_API_BASE_URL,
        timeout: float = 3.0,
        session: requests.Session | None = None,
        cache: GeocodingCache | None = None,
    ):
        """Initialize the Radar backend.

        Args:
            api_key: Radar secret or publishable key
            enabled: Configuration switch; ignored (treated as off) without a key
            base_url: API root, overridable for testing
            timeout: Per-request timeout in seconds
            session: Optional requests session to reuse
            cache: Optional result cache
        """
        if enabled and not api_key:
            logger.warning("Radar API enabled but no API key configured, disabling")
        super().__init__(enabled=bool(enabled and api_key), cache=cache)

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {"Authorization": api_key or "", "Content-Type": "application/json"}
        )

        if self.enabled:
            logger.info(f"Radar geocoder initialized with {timeout}s timeout")

    def _get(self, endpoint: str, params: dict[str, str]) -> dict[str, Any] | None:
        """Perform a GET request against the Radar API.

        Returns:
            Decoded JSON body or None if the call failed
        """
        try:
            response = self.session.get(
                f"{self.base_url}{endpoint}", params=params, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.Timeout:
            logger.warning(f"Radar request to {endpoint} timed out after {self.timeout}s")
            return None
        except requests.exceptions.RequestException as e:
            logger.warning(f"Radar request to {endpoint} failed: {e}")
            return None
        except ValueError as e:
            logger.error(f"Radar returned malformed JSON for {endpoint}: {e}")
            return None

        return payload if isinstance(payload, dict) else None

    @staticmethod
    def _first_address(payload: dict[str, Any] | None) -> dict[str, Any] | None:
        if not payload:
            return None
        addresses = payload.get("addresses")
        if not isinstance(addresses, list) or not addresses:
            return None
        first = addresses[0]
        return first if isinstance(first, dict) else None

    def reverse_geocode(self, coordinate: Coordinate) -> LocationResult:
        """Reverse geocode coordinates to a formatted address.

        Args:
            coordinate: Coordinates to look up

        Returns:
            LocationResult with the address, or coordinates only if not found
        """
        if not self.enabled or coordinate is None or not coordinate.is_valid():
            logger.debug(f"Radar disabled or invalid coordinates: {coordinate}")
            return LocationResult.from_coordinates(coordinate)

        query = str(coordinate)
        cached = self._cached("reverse", query)
        if cached:
            return cached

        first = self._first_address(
            self._get(REVERSE_GEOCODE_ENDPOINT, {"coordinates": query})
        )
        if first is None:
            logger.debug(f"No addresses found in Radar response for {query}")
            return LocationResult.from_coordinates(coordinate)

        address = text_field(first.get("formattedAddress"))
        result = LocationResult.from_coordinates_and_address(coordinate, address)
        if address:
            self._store("reverse", query, result)
        return result

    def forward_geocode(self, query: str) -> LocationResult | None:
        """Forward geocode free text to coordinates.

        Args:
            query: Address or place text

        Returns:
            LocationResult with coordinates and address, or None if not found
        """
        if not self.enabled or not query or not query.strip():
            logger.debug(f"Radar disabled or empty query: {query!r}")
            return None

        cached = self._cached("forward", query)
        if cached:
            return cached

        first = self._first_address(self._get(FORWARD_GEOCODE_ENDPOINT, {"query": query}))
        if first is None:
            return None

        try:
            coordinate = Coordinate(
                lat=float(first["latitude"]), lon=float(first["longitude"])
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Radar forward result missing coordinates for '{query[:50]}': {e}")
            return None

        result = LocationResult.from_coordinates_and_address(
            coordinate, text_field(first.get("formattedAddress"))
        )
        self._store("forward", query, result)
        return result

    def get_location_from_place_id(self, place_id: str) -> LocationResult | None:
        logger.debug(f"Place ID lookup not supported by Radar: {place_id}")
        return None
