"""Contract shared by the geocoding backends."""

from abc import ABC, abstractmethod

from mapsbridge.core.geocoding.cache import GeocodingCache
from mapsbridge.models.location import Coordinate, LocationResult


def text_field(value: object) -> str | None:
    """Upstream field as a non-blank string; anything else counts as missing."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class GeocodingBackend(ABC):
    """A geocoding service adapter.

    Backends never raise. A disabled backend is still fully constructed; it
    reports ``enabled = False`` and answers every call with its "not found"
    value: coordinates only for reverse lookups, ``None`` otherwise.
    """

    name: str = "unknown"

    def __init__(self, enabled: bool, cache: GeocodingCache | None = None):
        self.enabled = enabled
        self.cache = cache

    def is_enabled(self) -> bool:
        return self.enabled

    @abstractmethod
    def reverse_geocode(self, coordinate: Coordinate) -> LocationResult:
        """Coordinates to address; returns coordinates only when nothing is found."""

    @abstractmethod
    def forward_geocode(self, query: str) -> LocationResult | None:
        """Address or free text to coordinates."""

    @abstractmethod
    def get_location_from_place_id(self, place_id: str) -> LocationResult | None:
        """Opaque place identifier to coordinates, address and name."""

    def _cached(self, operation: str, query: str) -> LocationResult | None:
        if self.cache is None:
            return None
        return self.cache.get(self.name, operation, query)

    def _store(self, operation: str, query: str, result: LocationResult) -> None:
        if self.cache is not None:
            self.cache.set(self.name, operation, query, result)
