from .settings import (
    AppSettings,
    DocumentStoreSettings,
    IdentityProviderSettings,
    CORSSettings,
    DEFAULT_REDIRECT_URI,
    get_settings,
)
from .log_setup import configure_logging

__all__ = [
    "AppSettings",
    "DocumentStoreSettings",
    "IdentityProviderSettings",
    "CORSSettings",
    "DEFAULT_REDIRECT_URI",
    "get_settings",
    "configure_logging",
]
