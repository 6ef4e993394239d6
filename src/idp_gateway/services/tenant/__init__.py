from .schemas import TenantIdentityConfig, TenantConfigView, REQUIRED_FIELDS
from .store import TenantConfigStore, InMemoryTenantStore, DocumentStoreClient
from .provider import ConfigurationProvider, validate_config

__all__ = [
    "TenantIdentityConfig",
    "TenantConfigView",
    "REQUIRED_FIELDS",
    "TenantConfigStore",
    "InMemoryTenantStore",
    "DocumentStoreClient",
    "ConfigurationProvider",
    "validate_config",
]
