"""Single-regex extractors for providers whose links always carry coordinates.

Bing, Waze, OpenStreetMap and Komoot links encode the point directly in the
URL, so each gets one local strategy and no network fallback.
"""

from mapsbridge.extractors.base import (
    DEFAULT_PRIORITY,
    NUMBER,
    NUMBER_END,
    Extractor,
    RegexExtractor,
)

BING_PATTERN = (
    r"[?&]q=(?P<lat>[-+]?\d{1,3}(?:[.,]\d+)?),(?P<lon>[-+]?\d{1,3}(?:[.,]\d+)?)(?:$|[&#])"
    rf"|[?&]cp=(?P<lat2>{NUMBER})~(?P<lon2>{NUMBER}){NUMBER_END}"
)
WAZE_PATTERN = rf"ll[=.](?P<lat>{NUMBER})(?:,|%2C)(?P<lon>{NUMBER}){NUMBER_END}"
OPENSTREETMAP_PATTERN = (
    rf"mlat=(?P<lat>{NUMBER})&mlon=(?P<lon>{NUMBER}){NUMBER_END}"
    rf"|#map=\d+/(?P<lat2>{NUMBER})/(?P<lon2>{NUMBER}){NUMBER_END}"
)
KOMOOT_PATTERN = rf"@(?P<lat>{NUMBER}),(?P<lon>{NUMBER}){NUMBER_END}"


def bing_extractors() -> list[Extractor]:
    return [RegexExtractor("bing_coordinates", BING_PATTERN, DEFAULT_PRIORITY)]


def waze_extractors() -> list[Extractor]:
    # %2C stays encoded here, the pattern accepts it
    return [RegexExtractor("waze_ll", WAZE_PATTERN, DEFAULT_PRIORITY, decode=False)]


def openstreetmap_extractors() -> list[Extractor]:
    return [RegexExtractor("osm_coordinates", OPENSTREETMAP_PATTERN, DEFAULT_PRIORITY)]


def komoot_extractors() -> list[Extractor]:
    return [RegexExtractor("komoot_at_symbol", KOMOOT_PATTERN, DEFAULT_PRIORITY)]
