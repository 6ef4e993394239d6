from .tenant import ConfigurationProvider, InMemoryTenantStore, DocumentStoreClient
from .identity import IdentityGateway

__all__ = [
    "ConfigurationProvider",
    "InMemoryTenantStore",
    "DocumentStoreClient",
    "IdentityGateway",
]
