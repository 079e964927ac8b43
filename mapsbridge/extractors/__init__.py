"""Location extraction strategies and per-provider chains."""

from mapsbridge.extractors.base import (
    ExtractionOutcome,
    Extractor,
    ExtractorChain,
    RegexExtractor,
    parse_coordinate,
)

__all__ = [
    "ExtractionOutcome",
    "Extractor",
    "ExtractorChain",
    "RegexExtractor",
    "parse_coordinate",
]
