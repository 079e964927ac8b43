"""Test fixture package for mapsbridge.

Contains fixtures for:
- Mock geocoding backends, page fetcher and metrics sink
- FastAPI test application and clients
"""

from .geocoding import make_backend

__all__ = [
    # Geocoding
    "make_backend",
]
