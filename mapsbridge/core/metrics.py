"""Prometheus metrics for the API and the resolution pipeline."""

from typing import Protocol

from prometheus_client import Counter

from mapsbridge.models.location import ProviderId

# HTTP metrics (recorded by the metrics middleware)
REQUESTS_TOTAL = Counter(
    "mapsbridge_http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "path"],
)
RESPONSES_TOTAL = Counter(
    "mapsbridge_http_responses_total",
    "Total number of HTTP responses",
    labelnames=["status_code"],
)

# Resolution metrics
INPUT_TYPE_TOTAL = Counter(
    "mapsbridge_input_type_total",
    "Number of resolutions by input type (coordinates vs url)",
    labelnames=["type"],
)
PROVIDER_URL_TOTAL = Counter(
    "mapsbridge_provider_url_total",
    "Number of URLs received per map provider",
    labelnames=["provider"],
)
EXTRACTION_SUCCESS_TOTAL = Counter(
    "mapsbridge_extraction_success_total",
    "Successful extractions by map provider and extractor",
    labelnames=["provider", "extractor"],
)
EXTRACTION_FAILURE_TOTAL = Counter(
    "mapsbridge_extraction_failure_total",
    "URLs for which every extractor in the chain came up empty",
    labelnames=["provider"],
)
GEOCODING_OPERATION_TOTAL = Counter(
    "mapsbridge_geocoding_operation_total",
    "Successful geocoding operations by backend and operation",
    labelnames=["service", "operation"],
)

INPUT_COORDINATES = "coordinates"
INPUT_URL = "url"
UNKNOWN_PROVIDER = "unknown"

OP_REVERSE = "reverseGeocode"
OP_FORWARD = "forwardGeocode"
OP_PLACE_ID = "placeIdLookup"


class ResolutionMetrics(Protocol):
    """Sink the pipeline reports to. Implementations must not raise."""

    def track_input_type(self, input_type: str) -> None: ...

    def track_provider(self, provider: ProviderId | None) -> None: ...

    def track_extraction_success(
        self, provider: ProviderId, extractor: str
    ) -> None: ...

    def track_extraction_failure(self, provider: ProviderId) -> None: ...

    def track_geocoding(self, service: str, operation: str) -> None: ...


class PrometheusResolutionMetrics:
    """ResolutionMetrics backed by the module-level Prometheus counters."""

    def track_input_type(self, input_type: str) -> None:
        INPUT_TYPE_TOTAL.labels(type=input_type).inc()

    def track_provider(self, provider: ProviderId | None) -> None:
        name = provider.display_name if provider else UNKNOWN_PROVIDER
        PROVIDER_URL_TOTAL.labels(provider=name).inc()

    def track_extraction_success(self, provider: ProviderId, extractor: str) -> None:
        EXTRACTION_SUCCESS_TOTAL.labels(
            provider=provider.display_name, extractor=extractor
        ).inc()

    def track_extraction_failure(self, provider: ProviderId) -> None:
        EXTRACTION_FAILURE_TOTAL.labels(provider=provider.display_name).inc()

    def track_geocoding(self, service: str, operation: str) -> None:
        GEOCODING_OPERATION_TOTAL.labels(service=service, operation=operation).inc()
