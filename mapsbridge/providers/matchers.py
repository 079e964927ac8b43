"""URL matchers identifying which map provider a link belongs to."""

import re

from mapsbridge.models.location import ProviderId


class ProviderMatcher:
    """Pure pattern test over a URL; never touches the network, never raises."""

    def __init__(self, *patterns: str):
        self.patterns = [re.compile(pattern, re.IGNORECASE) for pattern in patterns]

    def matches(self, url: object) -> bool:
        if not isinstance(url, str) or not url.strip():
            return False
        candidate = url.strip()
        return any(pattern.fullmatch(candidate) for pattern in self.patterns)


PROVIDER_MATCHERS: dict[ProviderId, ProviderMatcher] = {
    ProviderId.GOOGLE: ProviderMatcher(
        r"https?://(www\.)?google\.com/maps.*",
        r"https?://maps\.google\.com.*",
        r"https?://maps\.app\.goo\.gl/.*",
        r"https?://goo\.gl/maps/.*",
    ),
    ProviderId.APPLE: ProviderMatcher(r"https?://(www\.)?maps\.apple\.com/.*"),
    ProviderId.BING: ProviderMatcher(r"https?://(www\.)?bing\.com/maps.*"),
    ProviderId.WAZE: ProviderMatcher(r"https?://(www\.|ul\.)?waze\.com/.*"),
    ProviderId.OPENSTREETMAP: ProviderMatcher(
        r"https?://(www\.)?openstreetmap\.org/.*"
    ),
    ProviderId.KOMOOT: ProviderMatcher(r"https?://(www\.)?komoot\.(com|de)/.*"),
}
