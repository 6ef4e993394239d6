from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class OAuthTokenSet(BaseModel):
    """Tokens returned by the authorization-code grant."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None


class ManagementTokenResponse(BaseModel):
    """Client-credentials grant response for the Management API audience."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None


class CreateUserPayload(BaseModel):
    """Body of a Management API user creation request."""

    email: str
    password: str
    connection: str
    user_metadata: Dict[str, Any] = Field(default_factory=dict)
    email_verified: bool = False
