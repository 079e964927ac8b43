"""API v1 router module."""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mapsbridge.api.v1.convert import router as convert_router
from mapsbridge.core.config import settings
from mapsbridge.resolver import LocationResolver, get_resolver

router = APIRouter(default_response_class=JSONResponse)
router.include_router(convert_router)


@router.get("/health")
def health_check(
    resolver: LocationResolver = Depends(get_resolver),
) -> dict[str, Any]:
    """Report service status and which geocoding backends are active."""
    return {
        "status": "healthy",
        "version": settings.version,
        "geocoding": {
            "radar": resolver.geocoding.radar.enabled,
            "google": resolver.geocoding.google.enabled,
        },
    }
