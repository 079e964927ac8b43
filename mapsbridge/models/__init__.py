"""Location data models."""

from mapsbridge.models.location import (
    CallerIdentity,
    Coordinate,
    LocationResult,
    ProviderId,
)

__all__ = ["CallerIdentity", "Coordinate", "LocationResult", "ProviderId"]
