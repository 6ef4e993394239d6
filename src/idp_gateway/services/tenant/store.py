"""
Tenant configuration stores.

A store maps a tenant key to the raw configuration record for that tenant.
Two implementations are provided: an in-memory registry used for local
development and tests, and a client for the Appwrite databases REST API where
tenant records live in production.
"""

import logging
from typing import Any, Dict, Optional, Protocol
from urllib.parse import quote

import httpx

from idp_gateway.config import DocumentStoreSettings
from idp_gateway.exceptions import ConfigFetchError

logger = logging.getLogger(__name__)


class TenantConfigStore(Protocol):
    """Interface for tenant configuration lookups - enables easy mocking."""

    async def get_record(self, tenant_key: str) -> Dict[str, Any]: ...


class InMemoryTenantStore:
    """Dict-backed tenant registry."""

    def __init__(self, records: Optional[Dict[str, Dict[str, Any]]] = None):
        self._records: Dict[str, Dict[str, Any]] = dict(records or {})
        self.lookups = 0

    def put(self, tenant_key: str, record: Dict[str, Any]) -> None:
        self._records[tenant_key] = dict(record)

    async def get_record(self, tenant_key: str) -> Dict[str, Any]:
        self.lookups += 1
        record = self._records.get(tenant_key)
        if record is None:
            raise ConfigFetchError(f"Tenant configuration not found: {tenant_key}")
        return dict(record)


class DocumentStoreClient:
    """
    Reads tenant records from an Appwrite database collection.

    Args:
        settings: Endpoint, project and collection identifiers
        http_client: Shared async HTTP client
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        settings: DocumentStoreSettings,
        http_client: httpx.AsyncClient,
        timeout: float = 10.0,
    ):
        self.settings = settings
        self.http_client = http_client
        self.timeout = timeout

    def document_url(self, tenant_key: str) -> str:
        base = self.settings.endpoint.rstrip("/")
        return (
            f"{base}/databases/{quote(self.settings.database_id, safe='')}"
            f"/collections/{quote(self.settings.collection_id, safe='')}"
            f"/documents/{quote(tenant_key, safe='')}"
        )

    async def get_record(self, tenant_key: str) -> Dict[str, Any]:
        if not self.settings.endpoint:
            raise ConfigFetchError("Document store endpoint is not configured")

        headers = {
            "X-Appwrite-Project": self.settings.project_id,
            "X-Appwrite-Key": self.settings.api_key,
        }

        try:
            response = await self.http_client.get(
                self.document_url(tenant_key),
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Document store unreachable: {type(e).__name__}")
            raise ConfigFetchError(f"Document store request failed: {e}") from e

        if response.status_code == 404:
            raise ConfigFetchError(f"Tenant configuration not found: {tenant_key}")

        if not response.is_success:
            raise ConfigFetchError(
                f"Document store returned {response.status_code}: {_error_message(response)}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise ConfigFetchError("Document store returned invalid JSON") from e


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message") or response.reason_phrase
    except (ValueError, AttributeError):
        return response.reason_phrase
