"""Hybrid geocoding across the Radar and Google backends.

Radar is cheaper and is asked first wherever it can answer. Google is the
fallback and the only backend able to resolve place identifiers. The
fallback rules per operation:

- reverse: Radar, accepted only with an address; then Google; then
  coordinates only
- place ID: Google only; a missing address is backfilled through Radar
- forward: Radar, accepted only with valid coordinates; then Google
"""

import logging

from mapsbridge.core.geocoding.base import GeocodingBackend
from mapsbridge.core.metrics import (
    OP_FORWARD,
    OP_PLACE_ID,
    OP_REVERSE,
    ResolutionMetrics,
)
from mapsbridge.models.location import Coordinate, LocationResult

logger = logging.getLogger(__name__)


class HybridGeocodingService:
    """Combines a lightweight and a full-featured geocoding backend."""

    def __init__(
        self,
        radar: GeocodingBackend,
        google: GeocodingBackend,
        metrics: ResolutionMetrics | None = None,
    ):
        self.radar = radar
        self.google = google
        self.metrics = metrics

    @property
    def enabled(self) -> bool:
        return self.radar.enabled or self.google.enabled

    def is_enabled(self) -> bool:
        return self.enabled

    def _track(self, backend: GeocodingBackend, operation: str) -> None:
        if self.metrics is not None:
            self.metrics.track_geocoding(backend.name, operation)

    def reverse_geocode(self, coordinate: Coordinate) -> LocationResult:
        """Reverse geocode coordinates, never failing the caller.

        Args:
            coordinate: Coordinates to look up

        Returns:
            LocationResult with an address if any backend found one,
            otherwise coordinates only
        """
        if self.radar.enabled:
            result = self.radar.reverse_geocode(coordinate)
            if result is not None and result.has_valid_address():
                logger.debug(f"Reverse geocoded {coordinate} with radar")
                self._track(self.radar, OP_REVERSE)
                return result
            logger.debug(f"Radar had no address for {coordinate}, trying google")

        if self.google.enabled:
            result = self.google.reverse_geocode(coordinate)
            if result is not None and result.has_valid_address():
                logger.debug(f"Reverse geocoded {coordinate} with google")
                self._track(self.google, OP_REVERSE)
                return result

        logger.info(f"No address found for {coordinate}, returning coordinates only")
        return LocationResult.from_coordinates(coordinate)

    def get_location_from_place_id(self, place_id: str) -> LocationResult | None:
        """Resolve a place ID through Google, backfilling the address via Radar.

        Args:
            place_id: Google place identifier

        Returns:
            LocationResult or None if the place cannot be resolved
        """
        if not self.google.enabled:
            logger.debug(f"Place ID {place_id} not resolvable, google disabled")
            return None

        result = self.google.get_location_from_place_id(place_id)
        if result is None or not result.has_valid_coordinates():
            return None
        self._track(self.google, OP_PLACE_ID)

        if not result.has_valid_address() and self.radar.enabled:
            enriched = self.radar.reverse_geocode(result.coordinates)
            if enriched is not None and enriched.has_valid_address():
                logger.debug(f"Backfilled address for place {place_id} with radar")
                self._track(self.radar, OP_REVERSE)
                result = result.with_address(enriched.address)

        return result

    def forward_geocode(self, query: str) -> LocationResult | None:
        """Forward geocode free text to coordinates.

        Args:
            query: Address or place text

        Returns:
            LocationResult with valid coordinates, or None
        """
        if self.radar.enabled:
            result = self.radar.forward_geocode(query)
            if result is not None and result.has_valid_coordinates():
                self._track(self.radar, OP_FORWARD)
                return result
            logger.debug(f"Radar could not geocode '{query[:50]}', trying google")

        if self.google.enabled:
            result = self.google.forward_geocode(query)
            if result is not None and result.has_valid_coordinates():
                self._track(self.google, OP_FORWARD)
                return result

        return None
