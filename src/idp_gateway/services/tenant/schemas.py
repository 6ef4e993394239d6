from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# Record key -> model attribute, in validation order.
REQUIRED_FIELDS = (
    ("domain", "domain"),
    ("clientId", "client_id"),
    ("clientSecret", "client_secret"),
    ("managementApiEndpoint", "management_api_endpoint"),
)


class TenantIdentityConfig(BaseModel):
    """Identity provider settings for one tenant, as stored in the config store."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    domain: Optional[str] = None
    client_id: Optional[str] = Field(default=None, alias="clientId")
    client_secret: Optional[str] = Field(default=None, alias="clientSecret", repr=False)
    management_api_endpoint: Optional[str] = Field(
        default=None, alias="managementApiEndpoint"
    )

    @property
    def authorization_url(self) -> str:
        return f"https://{self.domain}/authorize"

    @property
    def token_endpoint(self) -> str:
        return f"https://{self.domain}/oauth/token"

    @property
    def userinfo_endpoint(self) -> str:
        return f"https://{self.domain}/userinfo"

    @property
    def users_endpoint(self) -> str:
        return f"{self.management_api_endpoint}users"

    @property
    def api_audience(self) -> str:
        return f"https://{self.domain}/api/v2/"


class TenantConfigView(BaseModel):
    """Non-secret view of a loaded tenant configuration."""

    domain: str
    client_id: str
    management_api_endpoint: str
    redirect_uri: str
    authorization_url: str
    token_endpoint: str
    userinfo_endpoint: str
    users_endpoint: str
