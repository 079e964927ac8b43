"""Conversion endpoint: coordinates or map links to a resolved location."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from mapsbridge.models.location import CallerIdentity, LocationResult
from mapsbridge.resolver import LocationResolver, get_resolver

router = APIRouter(tags=["convert"])


class ConvertRequest(BaseModel):
    """Body of a conversion request."""

    input: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Coordinates ('lat,lon') or a map provider URL",
        examples=["40.6892,-74.0445"],
    )
    skip_reverse_geocode: bool = Field(
        False, description="Return bare coordinates for coordinate input"
    )


@router.post("/convert", response_model=LocationResult)
def convert(
    body: ConvertRequest,
    request: Request,
    resolver: LocationResolver = Depends(get_resolver),
) -> LocationResult:
    """Resolve coordinates or a map URL to a location.

    Invalid input, out of range coordinates and unresolvable links are
    reported as 400 by the error middleware.
    """
    caller = getattr(request.state, "caller", None) or CallerIdentity()
    return resolver.resolve(
        body.input, caller=caller, skip_reverse_geocode=body.skip_reverse_geocode
    )
