"""
Tenant configuration provider.
Loads a tenant's identity-provider settings, validates them and derives the
endpoint URLs every gateway operation depends on.
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from idp_gateway.config import DEFAULT_REDIRECT_URI
from idp_gateway.exceptions import (
    ConfigFetchError,
    ConfigValidationError,
    GatewayError,
    NotInitializedError,
)
from .schemas import REQUIRED_FIELDS, TenantConfigView, TenantIdentityConfig
from .store import TenantConfigStore

logger = logging.getLogger(__name__)


def validate_config(config: TenantIdentityConfig) -> bool:
    """
    Check that every required field is present and non-empty.

    Raises:
        ConfigValidationError: naming the first missing field, checked in the
            order domain, clientId, clientSecret, managementApiEndpoint
    """
    for record_key, attribute in REQUIRED_FIELDS:
        if not getattr(config, attribute):
            raise ConfigValidationError(missing_field=record_key)
    return True


class ConfigurationProvider:
    """
    Holds the configuration of a single tenant.

    Derived URL accessors raise NotInitializedError until load() and
    validate() have both succeeded.
    """

    def __init__(
        self,
        store: TenantConfigStore,
        redirect_uri: str = DEFAULT_REDIRECT_URI,
    ):
        self.store = store
        self.redirect_uri = redirect_uri
        self._config: Optional[TenantIdentityConfig] = None
        self._validated: bool = False
        self.tenant_key: Optional[str] = None

    async def load(self, tenant_key: str) -> TenantIdentityConfig:
        """Fetch the tenant record from the store."""
        try:
            record = await self.store.get_record(tenant_key)
            config = TenantIdentityConfig.model_validate(record)
        except GatewayError:
            raise
        except PydanticValidationError as e:
            raise ConfigFetchError(f"Malformed tenant record: {tenant_key}") from e
        except Exception as e:
            raise ConfigFetchError(
                f"Failed to fetch tenant configuration: {e}"
            ) from e

        self._config = config
        self._validated = False
        self.tenant_key = tenant_key
        logger.debug(f"Loaded tenant configuration: {tenant_key}")
        return config

    def validate(self) -> bool:
        if self._config is None:
            raise NotInitializedError("Config not initialized")
        validate_config(self._config)
        self._validated = True
        return True

    @property
    def is_valid(self) -> bool:
        return self._config is not None and self._validated

    @property
    def config(self) -> TenantIdentityConfig:
        if not self.is_valid:
            raise NotInitializedError("Config not initialized")
        return self._config

    # Accessors
    # ---------

    @property
    def domain(self) -> str:
        return self.config.domain

    @property
    def client_id(self) -> str:
        return self.config.client_id

    @property
    def client_secret(self) -> str:
        return self.config.client_secret

    @property
    def management_api_endpoint(self) -> str:
        return self.config.management_api_endpoint

    @property
    def authorization_url(self) -> str:
        return self.config.authorization_url

    @property
    def token_endpoint(self) -> str:
        return self.config.token_endpoint

    @property
    def userinfo_endpoint(self) -> str:
        return self.config.userinfo_endpoint

    @property
    def users_endpoint(self) -> str:
        return self.config.users_endpoint

    def describe(self) -> TenantConfigView:
        config = self.config
        return TenantConfigView(
            domain=config.domain,
            client_id=config.client_id,
            management_api_endpoint=config.management_api_endpoint,
            redirect_uri=self.redirect_uri,
            authorization_url=config.authorization_url,
            token_endpoint=config.token_endpoint,
            userinfo_endpoint=config.userinfo_endpoint,
            users_endpoint=config.users_endpoint,
        )
