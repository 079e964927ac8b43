"""Extractor contract, shared parsing helpers and the per-provider chain."""

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from operator import attrgetter
from typing import NamedTuple
from urllib.parse import unquote, unquote_plus

from mapsbridge.core.logging import get_logger
from mapsbridge.models.location import Coordinate, LocationResult, ProviderId

logger = get_logger(__name__)

# Signed decimal number; the negative lookahead used with it rejects
# "1.2.3" style tokens instead of matching a prefix of them.
NUMBER = r"[-+]?\d+(?:\.\d+)?"
NUMBER_END = r"(?![\d.])"

DEFAULT_PRIORITY = 100

PLACE_NAME_PATTERN = re.compile(r"/place/([^/@?#]+)")


def parse_coordinate(lat_text: str | None, lon_text: str | None) -> Coordinate | None:
    """Build a valid coordinate from two matched tokens.

    Comma decimal separators are normalized to dots. Unparseable or out of
    range values count as "not found".

    Args:
        lat_text: Latitude token
        lon_text: Longitude token

    Returns:
        Coordinate or None
    """
    if not lat_text or not lon_text:
        return None

    try:
        coordinate = Coordinate(
            lat=float(lat_text.strip().replace(",", ".")),
            lon=float(lon_text.strip().replace(",", ".")),
        )
    except ValueError:
        return None

    return coordinate if coordinate.is_valid() else None


def decode_url(url: str) -> str:
    """Percent-decode a URL, leaving ``+`` untouched."""
    return unquote(url)


def find_place_name(url: str) -> str | None:
    """Pull the place name out of a ``/place/<name>/`` path segment."""
    match = PLACE_NAME_PATTERN.search(url)
    if not match:
        return None
    name = unquote_plus(match.group(1)).strip()
    return name or None


class Extractor(ABC):
    """A single strategy for pulling a location out of a URL.

    ``extract`` never raises: unexpected errors are logged and reported as
    the empty result so the chain can move on.
    """

    name: str = "extractor"
    priority: int = DEFAULT_PRIORITY

    def extract(self, url: str) -> LocationResult:
        if not url or not url.strip():
            return LocationResult.empty()

        try:
            result = self._extract(url)
        except Exception as e:
            logger.warning(
                "extractor_failed",
                extractor=self.name,
                url=url,
                error_type=e.__class__.__name__,
                error=str(e),
            )
            return LocationResult.empty()

        return result if result is not None else LocationResult.empty()

    @abstractmethod
    def _extract(self, url: str) -> LocationResult | None:
        """Strategy body; may return None for "not found"."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, priority={self.priority})"


class RegexExtractor(Extractor):
    """Reads coordinates from named groups of a single regular expression.

    The pattern defines ``lat``/``lon`` groups, and may define ``lat2``/``lon2``
    for an alternative URL shape. The first match wins.
    """

    def __init__(
        self,
        name: str,
        pattern: str | re.Pattern[str],
        priority: int = DEFAULT_PRIORITY,
        decode: bool = True,
    ):
        self.name = name
        self.priority = priority
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.decode = decode

    def _extract(self, url: str) -> LocationResult | None:
        text = decode_url(url) if self.decode else url
        match = self.pattern.search(text)
        if not match:
            return None

        groups = match.groupdict()
        coordinate = parse_coordinate(
            groups.get("lat") or groups.get("lat2"),
            groups.get("lon") or groups.get("lon2"),
        )
        if coordinate is None:
            return None
        return LocationResult.from_coordinates(coordinate)


class ExtractionOutcome(NamedTuple):
    """Chain output plus the name of the extractor that produced it."""

    result: LocationResult
    extractor: str | None


class ExtractorChain:
    """Ordered extractors for one provider.

    Extractors run in ascending priority (declaration order breaks ties) and
    the first result with valid coordinates ends the chain.
    """

    def __init__(self, provider_id: ProviderId, extractors: Iterable[Extractor]):
        self.provider_id = provider_id
        self.extractors: list[Extractor] = sorted(extractors, key=attrgetter("priority"))

    @property
    def extractor_names(self) -> list[str]:
        return [extractor.name for extractor in self.extractors]

    def run(self, url: str) -> ExtractionOutcome:
        """Run the chain against a URL.

        Args:
            url: Provider URL

        Returns:
            ExtractionOutcome; the result is empty if every extractor failed
        """
        for extractor in self.extractors:
            result = extractor.extract(url)
            if result.has_valid_coordinates():
                logger.info(
                    "extraction_succeeded",
                    provider=self.provider_id.display_name,
                    extractor=extractor.name,
                    coordinates=str(result.coordinates),
                )
                return ExtractionOutcome(
                    result.with_source(self.provider_id, url), extractor.name
                )
            logger.debug(
                "extractor_no_match",
                provider=self.provider_id.display_name,
                extractor=extractor.name,
            )

        return ExtractionOutcome(LocationResult.empty(), None)
