"""Geocoding backends for the application.

This package provides:
- Radar backend (lightweight reverse/forward geocoding)
- Google backend (geocoding plus place ID resolution)
- Hybrid service combining both with per-operation fallback rules
- Optional Redis caching of backend results
"""

from mapsbridge.core.geocoding.base import GeocodingBackend
from mapsbridge.core.geocoding.cache import GeocodingCache
from mapsbridge.core.geocoding.google import GoogleGeocodingService
from mapsbridge.core.geocoding.hybrid import HybridGeocodingService
from mapsbridge.core.geocoding.radar import RadarGeocodingService

__all__ = [
    "GeocodingBackend",
    "GeocodingCache",
    "GoogleGeocodingService",
    "HybridGeocodingService",
    "RadarGeocodingService",
]
