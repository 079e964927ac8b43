"""Apple Maps extractors."""

import html
import re

from bs4 import BeautifulSoup

from mapsbridge.core.fetch import PageFetcher
from mapsbridge.core.logging import get_logger
from mapsbridge.extractors.base import (
    DEFAULT_PRIORITY,
    NUMBER,
    NUMBER_END,
    Extractor,
    RegexExtractor,
    parse_coordinate,
)
from mapsbridge.models.location import LocationResult

logger = get_logger(__name__)

PAGE_CONTENT_PRIORITY = 10
COORDINATE_PARAMETER_PRIORITY = DEFAULT_PRIORITY

# Title Apple gives dropped pins; it names nothing.
UNNAMED_PIN_TITLE = "Marked Location"

SHORT_ADDRESS_PATTERN = re.compile(r'"shortAddress":\s*"([^"]+)"', re.IGNORECASE)
COORDINATE_PARAMETER_PATTERN = re.compile(
    rf"(?:[?&](?:ll|sll|coordinate|center)=|@)(?P<lat>{NUMBER})(?:,|%2C)(?P<lon>{NUMBER}){NUMBER_END}"
)


def _meta_content(soup: BeautifulSoup, prop: str) -> str | None:
    tag = soup.find("meta", attrs={"property": prop})
    content = tag.get("content") if tag else None
    if isinstance(content, str) and content.strip():
        return html.unescape(content.strip())
    return None


def _address_from_title(title: str | None) -> str | None:
    """Pull the address out of ``"<name> in <address> - Apple Maps"``."""
    if not title:
        return None
    in_index = title.find(" in ")
    dash_index = title.rfind(" - ")
    if in_index > 0 and dash_index > in_index:
        return title[in_index + 4 : dash_index].strip() or None
    return None


class ApplePageContentExtractor(Extractor):
    """Fetches an Apple Maps page and reads its place meta tags."""

    name = "page_content"
    priority = PAGE_CONTENT_PRIORITY

    def __init__(self, fetcher: PageFetcher):
        self.fetcher = fetcher

    def _extract(self, url: str) -> LocationResult | None:
        page = self.fetcher.fetch(url)
        if page is None:
            return None

        soup = BeautifulSoup(page.text, "html.parser")

        place_name = _meta_content(soup, "og:title")
        if place_name == UNNAMED_PIN_TITLE:
            place_name = None

        coordinates = parse_coordinate(
            _meta_content(soup, "place:location:latitude"),
            _meta_content(soup, "place:location:longitude"),
        )

        address = None
        match = SHORT_ADDRESS_PATTERN.search(page.text)
        if match and match.group(1).strip():
            address = html.unescape(match.group(1).strip())
        elif soup.title and soup.title.string:
            address = _address_from_title(html.unescape(soup.title.string))

        logger.debug(
            "page_content_parsed",
            url=url,
            coordinates=str(coordinates) if coordinates else None,
            place_name=place_name,
            address=address,
        )
        return LocationResult.from_coordinates_address_and_name(
            coordinates, address, place_name
        )


def apple_extractors(fetcher: PageFetcher) -> list[Extractor]:
    return [
        ApplePageContentExtractor(fetcher),
        RegexExtractor(
            "coordinate_parameter",
            COORDINATE_PARAMETER_PATTERN,
            priority=COORDINATE_PARAMETER_PRIORITY,
            decode=False,
        ),
    ]
