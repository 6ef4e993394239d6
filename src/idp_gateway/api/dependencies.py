"""
This module defines the dependency injection system for the Identity Gateway
API using FastAPI.

"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

import httpx
from fastapi import Depends, HTTPException, Request, status

from idp_gateway.config import AppSettings, configure_logging, get_settings
from idp_gateway.services.identity import IdentityGateway
from idp_gateway.services.tenant import (
    ConfigurationProvider,
    DocumentStoreClient,
    TenantConfigStore,
)

logger = logging.getLogger(__name__)


# Application State Management
# ----------------------------


class AppState:
    """
    Application state container.

    One instance is attached to each FastAPI app and owns the shared HTTP
    client and the process-scoped identity gateway. The gateway itself is
    initialized lazily by the first request that needs it.

    Args:
        settings: Application settings
        store: Tenant store; defaults to the Appwrite document store
        http_client: Outbound client; created and owned by the state if omitted
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        store: Optional[TenantConfigStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.http_client = http_client
        self.gateway: Optional[IdentityGateway] = None
        self._owns_http_client = http_client is None
        self._initialized: bool = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Build the HTTP client, tenant store and gateway."""
        if self._initialized:
            return

        if self.http_client is None:
            self.http_client = httpx.AsyncClient(
                timeout=self.settings.http_timeout_seconds
            )

        if self.store is None:
            self.store = DocumentStoreClient(
                self.settings.store,
                self.http_client,
                timeout=self.settings.http_timeout_seconds,
            )

        provider = ConfigurationProvider(
            self.store, redirect_uri=self.settings.redirect_uri
        )
        self.gateway = IdentityGateway(
            provider,
            self.http_client,
            idp_settings=self.settings.idp,
            timeout=self.settings.http_timeout_seconds,
        )

        self._initialized = True

    async def shutdown(self) -> None:
        """Clean up all resources."""
        if self.http_client is not None and self._owns_http_client:
            await self.http_client.aclose()
            self.http_client = None

        self.gateway = None
        self._initialized = False


@asynccontextmanager
async def app_lifespan(app):
    state: AppState = app.state.gateway_state

    configure_logging(state.settings.log_level)
    await state.initialize()
    logger.info(
        f"{state.settings.app_name} started (environment: {state.settings.environment})"
    )

    yield

    await state.shutdown()
    logger.info(f"{state.settings.app_name} shutdown complete")


#       DEPENDENCY PROVIDERS
# ------------------------------------


def get_app_state(request: Request) -> AppState:
    return request.app.state.gateway_state


AppStateDep = Annotated[AppState, Depends(get_app_state)]


def get_settings_dep(state: AppStateDep) -> AppSettings:
    """Dependency for settings - allows override in tests."""
    return state.settings


SettingsDep = Annotated[AppSettings, Depends(get_settings_dep)]


def get_gateway(state: AppStateDep) -> IdentityGateway:
    """Dependency for the identity gateway."""
    if not state.gateway:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity gateway not available",
        )
    return state.gateway


GatewayDep = Annotated[IdentityGateway, Depends(get_gateway)]
