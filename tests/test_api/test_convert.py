"""Conversion and health endpoint tests."""

import pytest
from fastapi import status
from httpx import AsyncClient

from mapsbridge.core.config import settings
from mapsbridge.models.location import LocationResult

CONVERT = f"{settings.api_prefix}/convert"
NEW_YORK_URL = "https://www.google.com/maps/place/New+York/@40.7127753,-74.0059728,12z"


@pytest.mark.asyncio
async def test_convert_coordinates(
    test_app_async_client: AsyncClient, radar_backend, statue_of_liberty
) -> None:
    """Test coordinates are resolved with an address."""
    radar_backend.reverse_geocode.side_effect = None
    radar_backend.reverse_geocode.return_value = LocationResult.from_coordinates_and_address(
        statue_of_liberty, "Liberty Island, New York, NY 10004"
    )

    response = await test_app_async_client.post(CONVERT, json={"input": "40.6892,-74.0445"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["coordinates"] == {"lat": 40.6892, "lon": -74.0445}
    assert data["address"] == "Liberty Island, New York, NY 10004"
    assert data["map_source"] is None


@pytest.mark.asyncio
async def test_convert_skip_reverse_geocode(
    test_app_async_client: AsyncClient, radar_backend
) -> None:
    response = await test_app_async_client.post(
        CONVERT, json={"input": "40.6892 -74.0445", "skip_reverse_geocode": True}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["address"] is None
    radar_backend.reverse_geocode.assert_not_called()


@pytest.mark.asyncio
async def test_convert_url(test_app_async_client: AsyncClient) -> None:
    """Test a map URL is resolved with its provider and place name."""
    response = await test_app_async_client.post(CONVERT, json={"input": NEW_YORK_URL})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["map_source"] == "google"
    assert data["original_url"] == NEW_YORK_URL
    assert data["place_name"] == "New York"
    assert data["coordinates"] == {"lat": 40.7127753, "lon": -74.0059728}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "user_input,error",
    [
        ("not a url or coordinate", "InvalidInputError"),
        ("100,200", "InvalidCoordinateError"),
        ("https://www.google.com/maps/place/Nowhere", "CoordinateExtractionError"),
        ("https://example.com/map", "CoordinateExtractionError"),
    ],
)
async def test_convert_errors(
    test_app_async_client: AsyncClient, user_input: str, error: str
) -> None:
    """Test unresolvable input is a bad request."""
    response = await test_app_async_client.post(CONVERT, json={"input": user_input})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error"] == error
    assert data["status_code"] == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"input": ""}, {"input": "x" * 2049}])
async def test_convert_validation(test_app_async_client: AsyncClient, body) -> None:
    """Test malformed request bodies are rejected."""
    response = await test_app_async_client.post(CONVERT, json=body)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_convert_sync_client(test_app_client) -> None:
    """Test the endpoint through the synchronous client."""
    response = test_app_client.post(
        CONVERT, json={"input": "https://www.openstreetmap.org/#map=17/51.5007/-0.1246"}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["map_source"] == "osm"


@pytest.mark.asyncio
async def test_health_check(test_app_async_client: AsyncClient) -> None:
    """Test basic health check endpoint."""
    response = await test_app_async_client.get(f"{settings.api_prefix}/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == settings.version
    assert data["geocoding"] == {"radar": True, "google": True}
