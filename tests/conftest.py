"""
Pytest configuration and fixtures for Identity Gateway testing.

This module provides:
- A fake identity provider wired through httpx.MockTransport
- An in-memory tenant store seeded with a valid tenant record
- Uninitialized and initialized gateway fixtures
- FastAPI application and TestClient fixtures with injected state

Test types: Unit, Integration
"""

import os
import pytest
import pytest_asyncio
from typing import Generator
from fastapi.testclient import TestClient

from idp_gateway.api import AppState, create_application
from idp_gateway.config import AppSettings
from idp_gateway.services.tenant import InMemoryTenantStore
from test_utils import FakeIdentityProvider, TestTenants, build_gateway, build_settings


#                           ENVIRONMENT SETUP
# ----------------------------------------------------------------------------


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """
    Remove environment variables that would leak into AppSettings.

    Yields control to tests, then restores the original values.
    """
    keys = ["APP_ENV", "DEBUG", "REDIRECT_URI", "TENANT_KEY"]
    original_env = {key: os.environ.get(key) for key in keys}

    for key in keys:
        os.environ.pop(key, None)

    yield

    for key, value in original_env.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


#                          SETTINGS & STORE
# ----------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> AppSettings:
    return build_settings()


@pytest.fixture
def dev_settings() -> AppSettings:
    return build_settings(environment="development", debug=True)


@pytest.fixture
def tenant_store() -> InMemoryTenantStore:
    return InMemoryTenantStore({TestTenants.KEY: TestTenants.record()})


#                       IDENTITY PROVIDER & GATEWAY
# ----------------------------------------------------------------------------


@pytest.fixture
def fake_idp() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def http_client(fake_idp):
    return fake_idp.client()


@pytest.fixture
def gateway(tenant_store, http_client, test_settings):
    """Gateway that has not been initialized yet."""
    return build_gateway(tenant_store, http_client, test_settings)


@pytest_asyncio.fixture
async def ready_gateway(gateway):
    """Gateway initialized for the default test tenant."""
    await gateway.init(TestTenants.KEY)
    return gateway


#                         APPLICATION FIXTURES
# ----------------------------------------------------------------------------


@pytest.fixture
def app_state(test_settings, tenant_store, http_client) -> AppState:
    return AppState(settings=test_settings, store=tenant_store, http_client=http_client)


@pytest.fixture
def app(app_state):
    """
    Create a fresh FastAPI application instance for each test.

    Returns:
        FastAPI: Application wired to the fake provider and in-memory store
    """
    application = create_application(app_state)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """
    Create a TestClient; entering it runs the application lifespan.

    Example:
        def test_health_check(client):
            response = client.get("/health")
            assert response.status_code == 200
    """
    with TestClient(app) as test_client:
        yield test_client
