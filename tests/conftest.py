"""
Shared test fixtures for the Argon2 sizer tests.

Argon2id runs for real in every test, with the smallest parameters the
primitive accepts so that each derivation takes milliseconds.
"""
from typing import AsyncGenerator, Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from core.crypto import KdfParameters
from core.services import DerivationRequest, DerivationService



@pytest.fixture
def fast_params() -> KdfParameters:
    """Cheap Argon2id parameters (64 KiB, one pass, one lane)."""
    return KdfParameters(memory_cost=64, time_cost=1, parallelism=1)


@pytest.fixture
def derivation_service(fast_params) -> DerivationService:
    """Service with cheap parameters and the production policy."""
    return DerivationService(params=fast_params, max_concurrent=4, max_encoded_size=4096)


@pytest.fixture
def make_request():
    """Factory for DerivationRequest with valid defaults."""
    def _make(password: str = "password", salt: str = "saltsalt", size: int = 8) -> DerivationRequest:
        return DerivationRequest(password=password, salt=salt, desired_encoded_size=size)
    return _make


@pytest.fixture
def app():
    """The FastAPI app instance."""
    from main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def override_derivation_service(derivation_service):
    """Dependency override returning the cheap service."""
    def _get_derivation_service():
        return derivation_service
    return _get_derivation_service


@pytest.fixture
def client(app, derivation_service, override_derivation_service) -> Generator:
    """Synchronous test client; runs the lifespan against the cheap service."""
    from routers.derive import get_derivation_service

    app.dependency_overrides[get_derivation_service] = override_derivation_service

    with patch("main.get_derivation_service", return_value=derivation_service):
        with TestClient(app) as test_client:
            yield test_client

    app.dependency_overrides.clear()


async def _create_async_client(app, service_override, raise_app_exceptions: bool = True) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with the derivation service overridden."""
    from routers.derive import get_derivation_service

    app.dependency_overrides[get_derivation_service] = service_override

    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app, override_derivation_service) -> AsyncGenerator:
    """Async test client backed by the cheap derivation service."""
    async for client in _create_async_client(app, override_derivation_service):
        yield client


@pytest.fixture
async def lenient_async_client(app, override_derivation_service) -> AsyncGenerator:
    """Async test client that returns 500 responses instead of re-raising app errors."""
    async for client in _create_async_client(app, override_derivation_service, raise_app_exceptions=False):
        yield client
