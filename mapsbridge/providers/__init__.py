"""Map provider matching and registry."""

from mapsbridge.providers.matchers import PROVIDER_MATCHERS, ProviderMatcher
from mapsbridge.providers.registry import MapProvider, build_providers, find_provider

__all__ = [
    "PROVIDER_MATCHERS",
    "MapProvider",
    "ProviderMatcher",
    "build_providers",
    "find_provider",
]
