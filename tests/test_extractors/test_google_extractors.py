"""Tests for Google Maps extractors."""

from unittest.mock import MagicMock

import pytest

from mapsbridge.core.fetch import FetchedPage
from mapsbridge.extractors.base import ExtractorChain
from mapsbridge.extractors.google import (
    GoogleAddressQueryExtractor,
    GoogleAtSymbolExtractor,
    GoogleMarkerExtractor,
    GooglePageContentExtractor,
    GooglePlaceIdExtractor,
    GoogleQueryCoordinatesExtractor,
    GoogleSearchPathExtractor,
    find_address_query,
    find_place_id,
    google_extractors,
)
from mapsbridge.models.location import Coordinate, LocationResult, ProviderId

NEW_YORK_URL = "https://www.google.com/maps/place/New+York/@40.7127753,-74.0059728,12z"


class TestGoogleChainOrder:
    """Tests for the Google chain composition."""

    def test_cost_ascending_order(self, fetcher, hybrid):
        """Test the canonical strategy order."""
        chain = ExtractorChain(ProviderId.GOOGLE, google_extractors(fetcher, hybrid))
        assert chain.extractor_names == [
            "page_content",
            "marker_3d4d",
            "at_symbol",
            "query_coordinates",
            "search_path",
            "place_id",
            "address_query",
        ]

    def test_order_independent_of_declaration(self, fetcher, hybrid):
        """Test shuffled declaration still yields the same order."""
        extractors = google_extractors(fetcher, hybrid)
        chain = ExtractorChain(ProviderId.GOOGLE, list(reversed(extractors)))
        assert chain.extractor_names[0] == "page_content"
        assert chain.extractor_names[-1] == "address_query"

    def test_third_strategy_result_unaffected_by_earlier_ones(self, fetcher, hybrid):
        """Test a URL only the @ strategy parses resolves the same with or without earlier strategies."""
        full = ExtractorChain(ProviderId.GOOGLE, google_extractors(fetcher, hybrid))
        alone = ExtractorChain(ProviderId.GOOGLE, [GoogleAtSymbolExtractor()])

        full_outcome = full.run(NEW_YORK_URL)
        alone_outcome = alone.run(NEW_YORK_URL)

        assert full_outcome.extractor == "at_symbol"
        assert full_outcome.result == alone_outcome.result


class TestGooglePageContentExtractor:
    """Tests for the page content strategy."""

    def test_title_with_separator_and_coordinates(self, fetcher):
        """Test og:title splits into place and address, coordinates from HTML."""
        fetcher.fetch.return_value = FetchedPage(
            url="https://www.google.com/maps/place/Joe's",
            text=(
                "<html><head>"
                '<meta property="og:title" content="Joe&#39;s Pizza · 7 Carmine St, New York">'
                "</head><body>"
                '<a href="/maps/@40.7305,-74.0021,17z">map</a>'
                "</body></html>"
            ),
        )

        result = GooglePageContentExtractor(fetcher).extract("https://maps.app.goo.gl/abc")

        assert result.place_name == "Joe's Pizza"
        assert result.address == "7 Carmine St, New York"
        assert result.coordinates == Coordinate(lat=40.7305, lon=-74.0021)

    def test_itemprop_name_without_separator(self, fetcher):
        """Test itemprop=name is used and a plain title is the place name."""
        fetcher.fetch.return_value = FetchedPage(
            url="https://www.google.com/maps",
            text='<meta itemprop="name" content="Central Park"><p>@40.7829,-73.9654</p>',
        )

        result = GooglePageContentExtractor(fetcher).extract("https://maps.app.goo.gl/x")

        assert result.place_name == "Central Park"
        assert result.address is None
        assert result.coordinates == Coordinate(lat=40.7829, lon=-73.9654)

    def test_coordinates_from_redirect_target(self, fetcher):
        """Test coordinates fall back to the URL the short link resolved to."""
        fetcher.fetch.return_value = FetchedPage(
            url="https://www.google.com/maps/place/Louvre/@48.8606,2.3376,17z",
            text="<html></html>",
        )

        result = GooglePageContentExtractor(fetcher).extract("https://maps.app.goo.gl/y")

        assert result.coordinates == Coordinate(lat=48.8606, lon=2.3376)

    def test_invalid_coordinates_in_html_skipped(self, fetcher):
        """Test out of range HTML coordinates are ignored in favor of the URL."""
        fetcher.fetch.return_value = FetchedPage(
            url="https://maps.app.goo.gl/z",
            text="<p>@123.0,456.0</p>",
        )

        result = GooglePageContentExtractor(fetcher).extract(
            "https://www.google.com/maps/@10.5,20.5,3z"
        )

        assert result.coordinates == Coordinate(lat=10.5, lon=20.5)

    def test_unavailable_page(self, fetcher):
        """Test an unavailable page yields the empty result."""
        fetcher.fetch.return_value = None
        assert GooglePageContentExtractor(fetcher).extract(NEW_YORK_URL).is_empty()


class TestGoogleMarkerExtractor:
    """Tests for the !3d/!4d strategy."""

    def test_last_marker_wins(self):
        """Test the final occurrence of the marker pair is used."""
        url = (
            "https://www.google.com/maps/place/Empire+State+Building/"
            "@40.7,-74.0,17z/data=!3m1!4b1!4m6!3m5!1s0x89c259a9b3117469:0xd134e199a405a163"
            "!8m2!3d40.1111!4d-74.1111!16s%2Fm%2F02nd_!3d40.7484405!4d-73.9856644"
        )

        result = GoogleMarkerExtractor().extract(url)

        assert result.coordinates == Coordinate(lat=40.7484405, lon=-73.9856644)
        assert result.place_name == "Empire State Building"

    def test_no_marker(self):
        """Test URLs without markers are not matched."""
        assert GoogleMarkerExtractor().extract(NEW_YORK_URL).is_empty()

    def test_malformed_marker(self):
        """Test a marker with multiple decimal points is not found."""
        url = "https://www.google.com/maps/data=!3d40.1.2!4d-74.0"
        assert GoogleMarkerExtractor().extract(url).is_empty()


class TestGoogleAtSymbolExtractor:
    """Tests for the @lat,lon strategy."""

    def test_place_url(self):
        """Test coordinates and place name from a place URL."""
        result = GoogleAtSymbolExtractor().extract(NEW_YORK_URL)
        assert result.coordinates == Coordinate(lat=40.7127753, lon=-74.0059728)
        assert result.place_name == "New York"

    def test_zero_coordinates(self):
        """Test coordinates of zero are accepted."""
        result = GoogleAtSymbolExtractor().extract("https://www.google.com/maps/@0,0,3z")
        assert result.coordinates == Coordinate(lat=0.0, lon=0.0)

    def test_missing_component(self):
        """Test a missing longitude is not found."""
        url = "https://www.google.com/maps/@40.7127753,,12z"
        assert GoogleAtSymbolExtractor().extract(url).is_empty()


class TestGoogleQueryCoordinatesExtractor:
    """Tests for the q=lat,lon strategy."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://maps.google.com/?q=40.7128,-74.0060",
            "https://maps.google.com/?q=40,7128,-74,0060",
            "https://maps.google.com/?q=40.7128%2C-74.0060",
            "https://www.google.com/maps?hl=en&q=40.7128,-74.0060&z=10",
        ],
    )
    def test_dot_and_comma_decimals(self, url):
        """Test both decimal separators yield the same point."""
        result = GoogleQueryCoordinatesExtractor().extract(url)
        assert result.coordinates == Coordinate(lat=40.7128, lon=-74.006)

    @pytest.mark.parametrize(
        "url",
        [
            "https://maps.google.com/maps?q=40.7128,-74.0060+(Statue)",
            "https://maps.google.com/maps?q=40.7128,-74.0060+Statue+of+Liberty",
            "https://maps.google.com/maps?q=40.7128,+-74.0060",
        ],
    )
    def test_plus_encoded_label_suffix(self, url):
        """Test a '+' separated label after the pair does not hide the coordinates."""
        result = GoogleQueryCoordinatesExtractor().extract(url)
        assert result.coordinates == Coordinate(lat=40.7128, lon=-74.006)

    def test_text_query_not_matched(self):
        """Test a free-text query is left for the address strategy."""
        url = "https://maps.google.com/?q=Eiffel+Tower"
        assert GoogleQueryCoordinatesExtractor().extract(url).is_empty()


class TestGoogleSearchPathExtractor:
    """Tests for the /search/lat,lon strategy."""

    def test_search_path(self):
        """Test coordinates in a search path segment."""
        url = "https://www.google.com/maps/search/51.5007,-0.1246?entry=tts"
        result = GoogleSearchPathExtractor().extract(url)
        assert result.coordinates == Coordinate(lat=51.5007, lon=-0.1246)

    def test_encoded_search_path(self):
        """Test an encoded separator with a leading plus sign."""
        url = "https://www.google.com/maps/search/+51.5007%2C-0.1246"
        result = GoogleSearchPathExtractor().extract(url)
        assert result.coordinates == Coordinate(lat=51.5007, lon=-0.1246)


class TestPlaceIdHelpers:
    """Tests for place ID and address query discovery."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            (
                "https://www.google.com/maps/search/?api=1&query=x&place_id=ChIJOwg_06VPwokRYv534QaPC8g",
                "ChIJOwg_06VPwokRYv534QaPC8g",
            ),
            (
                "https://www.google.com/maps/place/X/data=!4m2!3m1!1s0x47e66e2964e34e2d:0x8ddca9ee380ef7e0",
                "0x47e66e2964e34e2d:0x8ddca9ee380ef7e0",
            ),
            (
                "https://www.google.com/maps/place/X/data=!1sChIJLU7jZClu5kcR4PcOOO6p3I0",
                "ChIJLU7jZClu5kcR4PcOOO6p3I0",
            ),
        ],
    )
    def test_find_place_id(self, url, expected):
        """Test each historical place ID encoding."""
        assert find_place_id(url) == expected

    def test_find_place_id_missing(self):
        """Test URLs without a place ID."""
        assert find_place_id(NEW_YORK_URL) is None

    def test_find_address_query(self):
        """Test the query is URL-decoded with '+' as space."""
        url = "https://maps.google.com/?q=1600+Amphitheatre+Pkwy%2C+Mountain+View"
        assert find_address_query(url) == "1600 Amphitheatre Pkwy, Mountain View"


class TestGooglePlaceIdExtractor:
    """Tests for the place ID strategy."""

    def test_resolves_through_geocoding(self):
        """Test the place ID is handed to the geocoding service."""
        geocoding = MagicMock()
        geocoding.get_location_from_place_id.return_value = (
            LocationResult.from_coordinates_address_and_name(
                Coordinate(lat=48.8584, lon=2.2945), "Champ de Mars, Paris", None
            )
        )
        url = "https://www.google.com/maps/place/Eiffel+Tower/data=!4m2!3m1!1sChIJLU7jZClu5kcR4PcOOO6p3I0"

        result = GooglePlaceIdExtractor(geocoding).extract(url)

        geocoding.get_location_from_place_id.assert_called_once_with(
            "ChIJLU7jZClu5kcR4PcOOO6p3I0"
        )
        assert result.coordinates == Coordinate(lat=48.8584, lon=2.2945)
        assert result.address == "Champ de Mars, Paris"
        assert result.place_name == "Eiffel Tower"

    def test_unresolved_place(self):
        """Test an unresolvable place ID yields the empty result."""
        geocoding = MagicMock()
        geocoding.get_location_from_place_id.return_value = None
        url = "https://www.google.com/maps?place_id=ChIJ123"
        assert GooglePlaceIdExtractor(geocoding).extract(url).is_empty()

    def test_no_place_id_skips_geocoding(self):
        """Test no geocoding call is made without a place ID."""
        geocoding = MagicMock()
        GooglePlaceIdExtractor(geocoding).extract(NEW_YORK_URL)
        geocoding.get_location_from_place_id.assert_not_called()


class TestGoogleAddressQueryExtractor:
    """Tests for the address query strategy."""

    def test_query_becomes_address(self):
        """Test the original query replaces the geocoded address."""
        geocoding = MagicMock()
        geocoding.forward_geocode.return_value = LocationResult.from_coordinates_and_address(
            Coordinate(lat=48.8584, lon=2.2945), "Av. Gustave Eiffel, 75007 Paris"
        )

        result = GoogleAddressQueryExtractor(geocoding).extract(
            "https://maps.google.com/?q=Eiffel+Tower+Paris"
        )

        geocoding.forward_geocode.assert_called_once_with("Eiffel Tower Paris")
        assert result.coordinates == Coordinate(lat=48.8584, lon=2.2945)
        assert result.address == "Eiffel Tower Paris"

    def test_geocoding_miss(self):
        """Test a failed forward geocode yields the empty result."""
        geocoding = MagicMock()
        geocoding.forward_geocode.return_value = None
        result = GoogleAddressQueryExtractor(geocoding).extract(
            "https://maps.google.com/?q=nowhere+at+all"
        )
        assert result.is_empty()
