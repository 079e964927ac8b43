"""Provider registry: a matcher plus an extractor chain per map service."""

from collections.abc import Sequence
from dataclasses import dataclass

from mapsbridge.core.fetch import PageFetcher
from mapsbridge.core.geocoding.hybrid import HybridGeocodingService
from mapsbridge.extractors.apple import apple_extractors
from mapsbridge.extractors.base import ExtractorChain
from mapsbridge.extractors.google import google_extractors
from mapsbridge.extractors.patterns import (
    bing_extractors,
    komoot_extractors,
    openstreetmap_extractors,
    waze_extractors,
)
from mapsbridge.models.location import ProviderId
from mapsbridge.providers.matchers import PROVIDER_MATCHERS, ProviderMatcher


@dataclass(frozen=True)
class MapProvider:
    """A map service the resolver understands."""

    provider_id: ProviderId
    matcher: ProviderMatcher
    chain: ExtractorChain

    def matches(self, url: str) -> bool:
        return self.matcher.matches(url)


def build_providers(
    fetcher: PageFetcher, geocoding: HybridGeocodingService
) -> list[MapProvider]:
    """Build every provider with its chain, in match order.

    Args:
        fetcher: Page fetcher for content extractors
        geocoding: Geocoding service for place ID and address fallbacks

    Returns:
        Providers ordered Google, Apple, Bing, Waze, OpenStreetMap, Komoot
    """
    extractors = {
        ProviderId.GOOGLE: google_extractors(fetcher, geocoding),
        ProviderId.APPLE: apple_extractors(fetcher),
        ProviderId.BING: bing_extractors(),
        ProviderId.WAZE: waze_extractors(),
        ProviderId.OPENSTREETMAP: openstreetmap_extractors(),
        ProviderId.KOMOOT: komoot_extractors(),
    }
    return [
        MapProvider(
            provider_id=provider_id,
            matcher=PROVIDER_MATCHERS[provider_id],
            chain=ExtractorChain(provider_id, extractors[provider_id]),
        )
        for provider_id in ProviderId
    ]


def find_provider(providers: Sequence[MapProvider], url: str) -> MapProvider | None:
    """First provider whose matcher accepts the URL."""
    for provider in providers:
        if provider.matches(url):
            return provider
    return None
