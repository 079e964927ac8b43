"""Input classification and location resolution.

``LocationResolver.resolve`` is the entry point of the pipeline. Input is
either a coordinate pair, which is validated and reverse geocoded, or a URL,
which is run through the extractor chain of the first provider that
recognizes it. Only the matched provider's chain runs; a URL no provider
recognizes resolves to nothing.
"""

import re
from collections.abc import Sequence

from structlog.contextvars import bound_contextvars

from mapsbridge.core.config import Settings, settings
from mapsbridge.core.errors import (
    CoordinateExtractionError,
    InvalidCoordinateError,
    InvalidInputError,
)
from mapsbridge.core.fetch import PageFetcher
from mapsbridge.core.geocoding import (
    GeocodingCache,
    GoogleGeocodingService,
    HybridGeocodingService,
    RadarGeocodingService,
)
from mapsbridge.core.logging import get_logger
from mapsbridge.core.metrics import (
    INPUT_COORDINATES,
    INPUT_URL,
    PrometheusResolutionMetrics,
    ResolutionMetrics,
)
from mapsbridge.models.location import CallerIdentity, Coordinate, LocationResult
from mapsbridge.providers.registry import MapProvider, build_providers, find_provider

logger = get_logger(__name__)

COORDINATE_INPUT_PATTERN = re.compile(
    r"^[-+]?\d+(?:\.\d*)?\s*(?:,|\s)\s*[-+]?\d+(?:\.\d*)?$"
)
URL_INPUT_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://\S+$")
EMBEDDED_URL_PATTERN = re.compile(r"https?://\S+", re.IGNORECASE)
TRAILING_PUNCTUATION = ".,;:!?)]}>\"'"


def is_coordinate_input(text: str) -> bool:
    return bool(COORDINATE_INPUT_PATTERN.match(text))


def is_url_input(text: str) -> bool:
    return bool(URL_INPUT_PATTERN.match(text))


def extract_embedded_url(text: str) -> str | None:
    """Find a URL inside free text, e.g. "Cafe Central https://maps.app.goo.gl/x".

    Args:
        text: Shared text

    Returns:
        The first http(s) URL with trailing punctuation removed, or None
    """
    match = EMBEDDED_URL_PATTERN.search(text)
    if not match:
        return None
    url = match.group(0).rstrip(TRAILING_PUNCTUATION)
    return url if is_url_input(url) else None


class LocationResolver:
    """Resolves user input to a location."""

    def __init__(
        self,
        providers: Sequence[MapProvider],
        geocoding: HybridGeocodingService,
        metrics: ResolutionMetrics,
    ):
        self.providers = list(providers)
        self.geocoding = geocoding
        self.metrics = metrics

    def resolve(
        self,
        user_input: str,
        caller: CallerIdentity | None = None,
        skip_reverse_geocode: bool = False,
    ) -> LocationResult:
        """Resolve coordinates or a map URL to a location.

        Args:
            user_input: Raw coordinates ("lat,lon" or "lat lon") or a map URL
            caller: Identity of whoever asked, bound to the log context
            skip_reverse_geocode: Return bare coordinates for coordinate input

        Returns:
            LocationResult with valid coordinates

        Raises:
            InvalidInputError: If input is neither coordinates nor a URL
            InvalidCoordinateError: If coordinates are malformed or out of range
            CoordinateExtractionError: If no strategy could resolve the URL
        """
        caller = caller or CallerIdentity()
        with bound_contextvars(**caller.log_context()):
            if user_input is None or not user_input.strip():
                raise InvalidInputError("Input is required")

            text = user_input.strip()
            if is_coordinate_input(text):
                self.metrics.track_input_type(INPUT_COORDINATES)
                return self.resolve_coordinates(text, skip_reverse_geocode)

            url = text if is_url_input(text) else extract_embedded_url(text)
            if url is None:
                logger.info("invalid_input", input=text[:100])
                raise InvalidInputError(
                    f"Input must be coordinates ('lat,lon') or a map URL: '{text[:100]}'"
                )

            self.metrics.track_input_type(INPUT_URL)
            return self.resolve_url(url)

    def resolve_coordinates(
        self, text: str, skip_reverse_geocode: bool = False
    ) -> LocationResult:
        """Validate a coordinate string and enrich it with an address.

        Raises:
            InvalidCoordinateError: If coordinates are malformed or out of range
        """
        coordinate = Coordinate.from_string(text)
        if not coordinate.is_valid():
            raise InvalidCoordinateError(
                f"Coordinates out of range: {coordinate}. "
                "Latitude must be within [-90, 90] and longitude within [-180, 180]"
            )

        if skip_reverse_geocode:
            return LocationResult.from_coordinates(coordinate)

        result = self.geocoding.reverse_geocode(coordinate)
        logger.info(
            "coordinates_resolved",
            coordinates=str(coordinate),
            has_address=result.has_valid_address(),
        )
        return result

    def resolve_url(self, url: str) -> LocationResult:
        """Run the matching provider's chain and backfill a missing address.

        Raises:
            CoordinateExtractionError: If no strategy could resolve the URL
        """
        provider = find_provider(self.providers, url)
        self.metrics.track_provider(provider.provider_id if provider else None)

        if provider is None:
            logger.warning("no_provider_matched", url=url)
            raise CoordinateExtractionError(f"Unsupported map URL: {url}")

        outcome = provider.chain.run(url)
        result = outcome.result
        if outcome.extractor is None or not result.has_valid_coordinates():
            self.metrics.track_extraction_failure(provider.provider_id)
            logger.warning(
                "resolution_failed",
                provider=provider.provider_id.display_name,
                url=url,
            )
            raise CoordinateExtractionError(
                f"Could not extract coordinates from URL: {url}"
            )

        self.metrics.track_extraction_success(provider.provider_id, outcome.extractor)

        if not result.has_valid_address():
            enriched = self.geocoding.reverse_geocode(result.coordinates)
            if enriched.has_valid_address():
                result = result.with_address(enriched.address)

        return result


def create_resolver(
    config: Settings | None = None, metrics: ResolutionMetrics | None = None
) -> LocationResolver:
    """Wire a resolver from configuration.

    Args:
        config: Settings to use, defaults to the module-level settings
        metrics: Metrics sink, defaults to Prometheus counters

    Returns:
        LocationResolver
    """
    config = config or settings
    metrics = metrics or PrometheusResolutionMetrics()
    cache = GeocodingCache.from_url(config.REDIS_URL, config.GEOCODING_CACHE_TTL)

    radar = RadarGeocodingService(
        api_key=config.RADAR_API_KEY,
        enabled=config.RADAR_API_ENABLED,
        base_url=config.RADAR_API_BASE_URL,
        timeout=config.RADAR_TIMEOUT,
        cache=cache,
    )
    google = GoogleGeocodingService(
        api_key=config.GOOGLE_API_KEY,
        enabled=config.GOOGLE_API_ENABLED,
        places_base_url=config.GOOGLE_PLACES_BASE_URL,
        timeout=config.GOOGLE_TIMEOUT,
        cache=cache,
    )
    geocoding = HybridGeocodingService(radar, google, metrics)
    fetcher = PageFetcher(timeout=config.FETCH_TIMEOUT, user_agent=config.FETCH_USER_AGENT)

    return LocationResolver(build_providers(fetcher, geocoding), geocoding, metrics)


_resolver: LocationResolver | None = None


def get_resolver() -> LocationResolver:
    """Get or create the singleton resolver instance.

    Returns:
        LocationResolver instance
    """
    global _resolver
    if _resolver is None:
        _resolver = create_resolver()
    return _resolver
