from .exceptions import (
    GatewayError,
    ConfigFetchError,
    ConfigValidationError,
    NotInitializedError,
    ProviderHttpError,
    ManagementTokenError,
    ValidationError,
    UserNotFoundError,
)
from .services.tenant import (
    TenantIdentityConfig,
    ConfigurationProvider,
    InMemoryTenantStore,
    DocumentStoreClient,
)
from .services.identity import IdentityGateway, OAuthTokenSet

__all__ = [
    "GatewayError",
    "ConfigFetchError",
    "ConfigValidationError",
    "NotInitializedError",
    "ProviderHttpError",
    "ManagementTokenError",
    "ValidationError",
    "UserNotFoundError",
    "TenantIdentityConfig",
    "ConfigurationProvider",
    "InMemoryTenantStore",
    "DocumentStoreClient",
    "IdentityGateway",
    "OAuthTokenSet",
]
