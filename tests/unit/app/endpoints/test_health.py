"""Unit tests for the /readiness and /liveness REST API endpoints."""

import pytest
from pytest_mock import MockerFixture
from fastapi import Response, status

from app.endpoints.health import liveness_probe_get_method, readiness_probe_get_method
from configuration import configuration
from tests.unit import config_dict
from tests.unit.utils.fakes import FakeGenerator


@pytest.fixture(autouse=True)
def _fresh_configuration():
    configuration.init_from_dict(config_dict)
    yield
    configuration.init_from_dict(config_dict)


@pytest.mark.asyncio
async def test_readiness_endpoints_not_initialized() -> None:
    """Test that service is not ready before endpoints are assembled."""
    response = Response()

    result = await readiness_probe_get_method(response)

    assert result.ready is False
    assert "chat endpoints are not initialized" in result.reason
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


@pytest.mark.asyncio
async def test_readiness_all_stores_ready() -> None:
    """Test that service is ready when every store is connected."""
    configuration.build_endpoint_registry(FakeGenerator())
    response = Response()

    result = await readiness_probe_get_method(response)

    assert result.ready is True
    assert result.reason == "Service is ready"
    assert result.stores == {
        "credentials": True,
        "response_cache": True,
        "chat_history": True,
    }
    assert response.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_readiness_store_not_ready(mocker: MockerFixture) -> None:
    """Test that disconnected store makes the service not ready."""
    configuration.build_endpoint_registry(FakeGenerator())
    mocker.patch.object(configuration.response_cache, "ready", return_value=False)
    response = Response()

    result = await readiness_probe_get_method(response)

    assert result.ready is False
    assert result.reason == "Stores not ready: response_cache"
    assert result.stores["response_cache"] is False
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


@pytest.mark.asyncio
async def test_liveness_endpoint() -> None:
    """Test the liveness endpoint handler."""
    result = await liveness_probe_get_method()
    assert result.alive is True
