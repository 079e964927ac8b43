"""Google Maps extractors.

Google links come in the richest set of shapes, so Google has the longest
chain. Priorities put local parsing of the URL text ahead of anything that
calls out to a geocoding API, with the page fetch first because short links
(maps.app.goo.gl) carry nothing parseable until they are followed.
"""

import re
from urllib.parse import unquote_plus

from bs4 import BeautifulSoup

from mapsbridge.core.fetch import PageFetcher
from mapsbridge.core.geocoding.hybrid import HybridGeocodingService
from mapsbridge.core.logging import get_logger
from mapsbridge.extractors.base import (
    NUMBER,
    NUMBER_END,
    Extractor,
    decode_url,
    find_place_name,
    parse_coordinate,
)
from mapsbridge.models.location import Coordinate, LocationResult

logger = get_logger(__name__)

PAGE_CONTENT_PRIORITY = 10
MARKER_3D4D_PRIORITY = 20
AT_SYMBOL_PRIORITY = 30
QUERY_COORDINATES_PRIORITY = 40
SEARCH_PATH_PRIORITY = 50
PLACE_ID_PRIORITY = 60
ADDRESS_QUERY_PRIORITY = 70

AT_COORDINATES_PATTERN = re.compile(rf"@({NUMBER}),({NUMBER}){NUMBER_END}")
MARKER_3D4D_PATTERN = re.compile(rf"!3d({NUMBER})!4d({NUMBER}){NUMBER_END}")
COMMA_NUMBER = r"[-+]?\d+(?:[.,]\d+)?"
QUERY_COORDINATES_PATTERN = re.compile(
    rf"[?&](?:q|query)=\s*(?P<lat>{COMMA_NUMBER})\s*,\s*(?P<lon>{COMMA_NUMBER})(?:$|[&#\s])"
)
SEARCH_PATH_PATTERN = re.compile(
    rf"/search/\s*({NUMBER})\s*,\s*({NUMBER}){NUMBER_END}"
)
PLACE_ID_PATTERNS = (
    re.compile(r"[?&]place_id=([\w\-]+)"),
    re.compile(r"!3m\d+!1s([\w\-:]+)"),
    re.compile(r"!1s([\w\-:]+)"),
)
ADDRESS_QUERY_PATTERN = re.compile(r"[?&](?:q|query)=([^&#]+)")
TITLE_SEPARATOR = re.compile(r"\s*[·•]\s*")


def find_place_id(url: str) -> str | None:
    """Find a place identifier in any of its historical URL encodings."""
    for pattern in PLACE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def find_address_query(url: str) -> str | None:
    """Find a free-text ``q=``/``query=`` parameter, URL-decoded."""
    match = ADDRESS_QUERY_PATTERN.search(url)
    if not match:
        return None
    query = unquote_plus(match.group(1)).strip()
    return query or None


class GooglePageContentExtractor(Extractor):
    """Fetches the page and reads the place from its meta tags.

    The ``og:title`` content looks like ``"Place · Address"``; a title without
    a separator is taken as the place name. Coordinates come from the first
    ``@lat,lon`` in the page body, then in the redirect target, then in the
    URL itself.
    """

    name = "page_content"
    priority = PAGE_CONTENT_PRIORITY

    def __init__(self, fetcher: PageFetcher):
        self.fetcher = fetcher

    @staticmethod
    def _meta_title(soup: BeautifulSoup) -> str | None:
        for attrs in ({"property": "og:title"}, {"itemprop": "name"}):
            tag = soup.find("meta", attrs=attrs)
            content = tag.get("content") if tag else None
            if isinstance(content, str) and content.strip():
                return content.strip()
        return None

    @staticmethod
    def _split_title(title: str | None) -> tuple[str | None, str | None]:
        if not title:
            return None, None
        parts = TITLE_SEPARATOR.split(title, maxsplit=1)
        if len(parts) == 2:
            return parts[0].strip() or None, parts[1].strip() or None
        return title.strip(), None

    @staticmethod
    def _find_coordinates(*texts: str) -> Coordinate | None:
        for text in texts:
            if not text:
                continue
            match = AT_COORDINATES_PATTERN.search(text)
            if match:
                coordinate = parse_coordinate(match.group(1), match.group(2))
                if coordinate is not None:
                    return coordinate
        return None

    def _extract(self, url: str) -> LocationResult | None:
        page = self.fetcher.fetch(url)
        if page is None:
            return None

        soup = BeautifulSoup(page.text, "html.parser")
        place_name, address = self._split_title(self._meta_title(soup))
        coordinates = self._find_coordinates(page.text, page.url, url)

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


class GoogleMarkerExtractor(Extractor):
    """Reads ``!3d<lat>!4d<lon>`` data markers; the last occurrence wins."""

    name = "marker_3d4d"
    priority = MARKER_3D4D_PRIORITY

    def _extract(self, url: str) -> LocationResult | None:
        matches = MARKER_3D4D_PATTERN.findall(url)
        if not matches:
            return None

        lat_text, lon_text = matches[-1]
        coordinate = parse_coordinate(lat_text, lon_text)
        if coordinate is None:
            return None
        return LocationResult.from_coordinates_address_and_name(
            coordinate, None, find_place_name(url)
        )


class GoogleAtSymbolExtractor(Extractor):
    """Reads the ``@lat,lon,zoom`` viewport segment."""

    name = "at_symbol"
    priority = AT_SYMBOL_PRIORITY

    def _extract(self, url: str) -> LocationResult | None:
        match = AT_COORDINATES_PATTERN.search(url)
        if not match:
            return None

        coordinate = parse_coordinate(match.group(1), match.group(2))
        if coordinate is None:
            return None
        return LocationResult.from_coordinates_address_and_name(
            coordinate, None, find_place_name(url)
        )


class GoogleQueryCoordinatesExtractor(Extractor):
    """Reads ``q=lat,lon``, accepting comma decimal separators."""

    name = "query_coordinates"
    priority = QUERY_COORDINATES_PRIORITY

    def _extract(self, url: str) -> LocationResult | None:
        # "+" encodes the space before a "+(label)" suffix
        match = QUERY_COORDINATES_PATTERN.search(unquote_plus(url))
        if not match:
            return None

        coordinate = parse_coordinate(match.group("lat"), match.group("lon"))
        if coordinate is None:
            return None
        return LocationResult.from_coordinates(coordinate)


class GoogleSearchPathExtractor(Extractor):
    """Reads ``/search/lat,lon`` path segments."""

    name = "search_path"
    priority = SEARCH_PATH_PRIORITY

    def _extract(self, url: str) -> LocationResult | None:
        match = SEARCH_PATH_PATTERN.search(decode_url(url))
        if not match:
            return None

        coordinate = parse_coordinate(match.group(1), match.group(2))
        if coordinate is None:
            return None
        return LocationResult.from_coordinates(coordinate)


class GooglePlaceIdExtractor(Extractor):
    """Resolves an embedded place identifier through the geocoding service."""

    name = "place_id"
    priority = PLACE_ID_PRIORITY

    def __init__(self, geocoding: HybridGeocodingService):
        self.geocoding = geocoding

    def _extract(self, url: str) -> LocationResult | None:
        place_id = find_place_id(url)
        if not place_id:
            return None

        logger.debug("place_id_found", place_id=place_id)
        result = self.geocoding.get_location_from_place_id(place_id)
        if result is None or not result.has_valid_coordinates():
            return None

        if not result.has_valid_place_name():
            result = result.model_copy(update={"place_name": find_place_name(url)})
        return result


class GoogleAddressQueryExtractor(Extractor):
    """Forward geocodes the free-text query; the query becomes the address."""

    name = "address_query"
    priority = ADDRESS_QUERY_PRIORITY

    def __init__(self, geocoding: HybridGeocodingService):
        self.geocoding = geocoding

    def _extract(self, url: str) -> LocationResult | None:
        query = find_address_query(url)
        if not query:
            return None

        logger.debug("address_query_found", query=query)
        result = self.geocoding.forward_geocode(query)
        if result is None or not result.has_valid_coordinates():
            return None
        return result.with_address(query)


def google_extractors(
    fetcher: PageFetcher, geocoding: HybridGeocodingService
) -> list[Extractor]:
    """All Google strategies, in declaration order."""
    return [
        GooglePageContentExtractor(fetcher),
        GoogleMarkerExtractor(),
        GoogleAtSymbolExtractor(),
        GoogleQueryCoordinatesExtractor(),
        GoogleSearchPathExtractor(),
        GooglePlaceIdExtractor(geocoding),
        GoogleAddressQueryExtractor(geocoding),
    ]
