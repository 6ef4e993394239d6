from .schemas import OAuthTokenSet, ManagementTokenResponse, CreateUserPayload
from .gateway import IdentityGateway, DEFAULT_STATE, DEFAULT_SCOPE

__all__ = [
    "OAuthTokenSet",
    "ManagementTokenResponse",
    "CreateUserPayload",
    "IdentityGateway",
    "DEFAULT_STATE",
    "DEFAULT_SCOPE",
]
