"""
Identity gateway service.
Brokers OAuth 2.0 Authorization Code and Client Credentials flows against the
identity provider, and user administration through its Management API.

Every Management API operation fetches a fresh management token before issuing
its own request; tokens are never cached or reused across calls.
"""

import asyncio
import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError as PydanticValidationError

from idp_gateway.config import IdentityProviderSettings
from idp_gateway.exceptions import (
    GatewayError,
    ManagementTokenError,
    NotInitializedError,
    ProviderHttpError,
    UserNotFoundError,
    ValidationError,
)
from idp_gateway.services.tenant import ConfigurationProvider, TenantConfigView
from .schemas import CreateUserPayload, ManagementTokenResponse, OAuthTokenSet

logger = logging.getLogger(__name__)


DEFAULT_STATE = "default-state"
DEFAULT_SCOPE = "openid profile email"


@contextmanager
def _failure_context(action: str, error_class=ProviderHttpError):
    """Re-raise gateway and transport errors as 'Failed to <action>: <cause>'."""
    try:
        yield
    except GatewayError as e:
        raise e.with_prefix(f"Failed to {action}") from e
    except httpx.HTTPError as e:
        raise error_class(f"Failed to {action}: {e}") from e
    except json.JSONDecodeError as e:
        raise error_class(f"Failed to {action}: invalid JSON response") from e


def _provider_message(response: httpx.Response, *keys: str) -> str:
    """Pull a human readable message out of a provider error response."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict):
        for key in keys or ("error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


class IdentityGateway:
    """
    Process-scoped gateway session for one tenant.

    The gateway starts uninitialized. init() loads and validates the tenant
    configuration exactly once; until it succeeds every other operation
    except is_ready() raises NotInitializedError without touching the network.

    Args:
        provider: Configuration provider for the tenant
        http_client: Shared async HTTP client for outbound calls
        idp_settings: Connection names and password-reset options
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        provider: ConfigurationProvider,
        http_client: httpx.AsyncClient,
        idp_settings: Optional[IdentityProviderSettings] = None,
        timeout: float = 10.0,
    ):
        self.provider = provider
        self.http_client = http_client
        self.idp_settings = idp_settings or IdentityProviderSettings()
        self.timeout = timeout
        self._initialized: bool = False
        self._init_lock = asyncio.Lock()

    #       LIFECYCLE
    # ------------------------------

    def is_ready(self) -> bool:
        return self._initialized

    async def init(self, tenant_key: str) -> TenantConfigView:
        """
        Load and validate the tenant configuration.

        Concurrent callers are serialized; once the gateway is ready further
        calls return the existing configuration view.

        Raises:
            ConfigFetchError: If the store has no usable record
            ConfigValidationError: If a required field is missing
        """
        async with self._init_lock:
            if self._initialized:
                return self.provider.describe()

            with _failure_context("initialize identity gateway"):
                await self.provider.load(tenant_key)
                self.provider.validate()

            self._initialized = True
            logger.info(f"Identity gateway initialized for tenant: {tenant_key}")
            return self.provider.describe()

    def _require_ready(self) -> None:
        if not self._initialized:
            raise NotInitializedError("Gateway not initialized")

    def get_config(self) -> TenantConfigView:
        self._require_ready()
        return self.provider.describe()

    #       OAUTH FLOWS
    # ------------------------------

    def generate_authorization_url(
        self, state: str = DEFAULT_STATE, scope: str = DEFAULT_SCOPE
    ) -> str:
        """
        Build the provider's authorization URL (step 1 of the code flow).

        Parameters are always emitted in the order client_id, redirect_uri,
        response_type, scope, state.
        """
        self._require_ready()

        query = urlencode(
            [
                ("client_id", self.provider.client_id),
                ("redirect_uri", self.provider.redirect_uri),
                ("response_type", "code"),
                ("scope", scope),
                ("state", state),
            ]
        )
        return f"{self.provider.authorization_url}?{query}"

    async def exchange_code_for_token(self, code: str) -> OAuthTokenSet:
        """Exchange an authorization code for tokens (step 2 of the code flow)."""
        self._require_ready()

        with _failure_context("exchange code"):
            response = await self.http_client.post(
                self.provider.token_endpoint,
                json={
                    "client_id": self.provider.client_id,
                    "client_secret": self.provider.client_secret,
                    "audience": self.provider.config.api_audience,
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.provider.redirect_uri,
                },
                timeout=self.timeout,
            )

            if not response.is_success:
                raise ProviderHttpError(
                    f"Token exchange failed: {_provider_message(response, 'error_description', 'error')}",
                    provider_status=response.status_code,
                )

            try:
                return OAuthTokenSet.model_validate(response.json())
            except (ValueError, PydanticValidationError) as e:
                raise ProviderHttpError(
                    "Token exchange failed: malformed token response",
                    provider_status=response.status_code,
                ) from e

    async def get_user_info(self, access_token: str) -> Dict[str, Any]:
        self._require_ready()

        with _failure_context("fetch user info"):
            response = await self.http_client.get(
                self.provider.userinfo_endpoint,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )

            if not response.is_success:
                raise ProviderHttpError(
                    f"Failed to get user info: {response.reason_phrase}",
                    provider_status=response.status_code,
                )

            return response.json()

    async def get_management_token(self) -> str:
        """Obtain a Management API token with the client-credentials grant."""
        self._require_ready()

        with _failure_context("get management token", ManagementTokenError):
            response = await self.http_client.post(
                self.provider.token_endpoint,
                json={
                    "client_id": self.provider.client_id,
                    "client_secret": self.provider.client_secret,
                    "audience": self.provider.management_api_endpoint,
                    "grant_type": "client_credentials",
                },
                timeout=self.timeout,
            )

            if not response.is_success:
                raise ManagementTokenError(
                    f"Token endpoint rejected client credentials: {_provider_message(response)}",
                    provider_status=response.status_code,
                )

            try:
                token = ManagementTokenResponse.model_validate(response.json())
            except (ValueError, PydanticValidationError) as e:
                raise ManagementTokenError(
                    "Token endpoint returned no access token",
                    provider_status=response.status_code,
                ) from e

            return token.access_token

    #       MANAGEMENT API
    # ------------------------------

    async def _management_request(
        self,
        method: str,
        url: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        mgmt_token = await self.get_management_token()

        return await self.http_client.request(
            method,
            url,
            json=json,
            params=params,
            headers={"Authorization": f"Bearer {mgmt_token}"},
            timeout=self.timeout,
        )

    def _user_url(self, user_id: str) -> str:
        return f"{self.provider.users_endpoint}/{quote(user_id, safe='')}"

    async def create_user(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Create a database-connection user (sign up)."""
        self._require_ready()

        if not email or not password:
            raise ValidationError("Email and password are required")

        payload = CreateUserPayload(
            email=email,
            password=password,
            connection=self.idp_settings.user_connection,
            user_metadata=metadata or {},
            email_verified=False,
        )

        with _failure_context("create user"):
            response = await self._management_request(
                "POST", self.provider.users_endpoint, json=payload.model_dump()
            )

            if not response.is_success:
                raise ProviderHttpError(
                    f"User creation failed: {_provider_message(response, 'message', 'error')}",
                    provider_status=response.status_code,
                )

            return response.json()

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        self._require_ready()

        with _failure_context("get user"):
            response = await self._management_request("GET", self._user_url(user_id))

            if response.status_code == 404:
                raise UserNotFoundError(f"User not found: {user_id}")

            if not response.is_success:
                raise ProviderHttpError(
                    f"User lookup failed: {_provider_message(response, 'message', 'error')}",
                    provider_status=response.status_code,
                )

            return response.json()

    async def find_users_by_email(self, email: str) -> List[Dict[str, Any]]:
        """Search users by exact email through the v3 search engine."""
        self._require_ready()

        with _failure_context("search users by email"):
            response = await self._management_request(
                "GET",
                self.provider.users_endpoint,
                params={"q": f'email:"{email}"', "search_engine": "v3"},
            )

            if not response.is_success:
                raise ProviderHttpError(
                    f"User search failed: {_provider_message(response, 'message', 'error')}",
                    provider_status=response.status_code,
                )

            users = response.json()
            if not isinstance(users, list):
                raise ProviderHttpError(
                    "User search failed: unexpected response",
                    provider_status=response.status_code,
                )
            return users

    async def update_user(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        self._require_ready()

        if not isinstance(updates, dict):
            raise ValidationError("updates must be an object")

        with _failure_context("update user"):
            response = await self._management_request(
                "PATCH", self._user_url(user_id), json=updates
            )

            if not response.is_success:
                raise ProviderHttpError(
                    f"User update failed: {_provider_message(response, 'message', 'error')}",
                    provider_status=response.status_code,
                )

            return response.json()

    async def delete_user(self, user_id: str) -> bool:
        self._require_ready()

        with _failure_context("delete user"):
            response = await self._management_request("DELETE", self._user_url(user_id))

            if not response.is_success:
                raise ProviderHttpError(
                    f"User deletion failed: {_provider_message(response, 'message', 'error')}",
                    provider_status=response.status_code,
                )

            return True

    async def change_password(self, user_id: str, new_password: str) -> Dict[str, Any]:
        self._require_ready()
        return await self.update_user(user_id, {"password": new_password})

    async def send_password_reset_email(self, email: str) -> bool:
        self._require_ready()

        with _failure_context("send password reset"):
            response = await self._management_request(
                "POST",
                f"{self.provider.management_api_endpoint}jobs/send-verification-email",
                json={
                    "client_id": self.provider.client_id,
                    "user_id": email,
                },
            )

            if not response.is_success:
                raise ProviderHttpError(
                    f"Failed to send reset email: {_provider_message(response, 'message', 'error')}",
                    provider_status=response.status_code,
                )

            return True

    async def create_password_change_ticket(
        self, email: str, ttl_sec: Optional[int] = None
    ) -> Dict[str, Any]:
        """Create a password-change ticket; the provider emails the link to the user."""
        self._require_ready()

        body = {
            "client_id": self.provider.client_id,
            "email": email,
            "ttl_sec": ttl_sec or self.idp_settings.password_reset_ttl_sec,
        }
        if self.idp_settings.password_reset_connection_id:
            body["connection_id"] = self.idp_settings.password_reset_connection_id

        with _failure_context("create password change ticket"):
            response = await self._management_request(
                "POST",
                f"{self.provider.management_api_endpoint}tickets/password-change",
                json=body,
            )

            if not response.is_success:
                raise ProviderHttpError(
                    f"Password change ticket rejected: {_provider_message(response, 'message', 'error')}",
                    provider_status=response.status_code,
                )

            return response.json()
