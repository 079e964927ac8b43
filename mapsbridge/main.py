"""Main FastAPI application module."""

import os

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette import status

from mapsbridge.api.v1.router import router as v1_router
from mapsbridge.core.config import settings
from mapsbridge.core.logging import configure_logging
from mapsbridge.middleware.context import RequestContextMiddleware
from mapsbridge.middleware.errors import ErrorHandlingMiddleware
from mapsbridge.middleware.metrics import MetricsMiddleware

configure_logging(
    testing=os.getenv("TESTING") == "true",
    level=settings.LOG_LEVEL,
    json_logs=settings.JSON_LOGS,
)

app = FastAPI(
    title=settings.app_name,
    description="Resolve map provider links and raw coordinates to a location",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    default_response_class=JSONResponse,
)

# Add middleware in order (inside -> out):
# 1. CORS (outermost)
# 2. Request context (correlation ID, caller identity)
# 3. Metrics (tracks all requests)
# 4. Error handling (innermost - handles all errors)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
    max_age=600,
)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(ErrorHandlingMiddleware)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/", include_in_schema=False)
async def root_redirect() -> Response:
    """Redirect root path to docs."""
    return RedirectResponse(url="/docs", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


app.include_router(v1_router, prefix=settings.api_prefix)
