"""
Test suite for tenant configuration loading and validation.

Coverage:
- Required field validation and its stable reporting order
- Lazy loading from the tenant store and fetch failures
- Derived endpoint URLs and their availability before validation
- Secret handling in repr and the public configuration view
- Appwrite document store client against a mocked transport

Test types: Unit
"""

import httpx
import pytest

from idp_gateway.config import DocumentStoreSettings
from idp_gateway.exceptions import (
    ConfigFetchError,
    ConfigValidationError,
    NotInitializedError,
)
from idp_gateway.services.tenant import (
    ConfigurationProvider,
    DocumentStoreClient,
    InMemoryTenantStore,
    TenantIdentityConfig,
    validate_config,
)
from test_utils import TestTenants


#                          VALIDATION TESTS
# ----------------------------------------------------------------------------


@pytest.mark.config
@pytest.mark.unit
class TestValidateConfig:
    def test_complete_config_is_valid(self):
        config = TenantIdentityConfig.model_validate(TestTenants.record())
        assert validate_config(config) is True

    @pytest.mark.parametrize(
        "missing",
        ["domain", "clientId", "clientSecret", "managementApiEndpoint"],
    )
    def test_reports_exactly_the_missing_field(self, missing):
        record = TestTenants.record()
        del record[missing]
        config = TenantIdentityConfig.model_validate(record)

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(config)

        assert exc_info.value.missing_field == missing
        assert exc_info.value.message == f"Missing required configuration: {missing}"

    @pytest.mark.parametrize(
        "empty",
        ["domain", "clientId", "clientSecret", "managementApiEndpoint"],
    )
    def test_empty_string_counts_as_missing(self, empty):
        config = TenantIdentityConfig.model_validate(TestTenants.record(**{empty: ""}))

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(config)

        assert exc_info.value.missing_field == empty

    def test_first_missing_field_wins(self):
        config = TenantIdentityConfig.model_validate(
            {"clientId": "c1", "managementApiEndpoint": ""}
        )

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(config)

        assert exc_info.value.missing_field == "domain"

    def test_client_secret_missing_after_domain_and_client_id(self):
        config = TenantIdentityConfig.model_validate(
            {"domain": "t.example.com", "clientId": "c1"}
        )

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(config)

        assert exc_info.value.missing_field == "clientSecret"


#                           MODEL TESTS
# ----------------------------------------------------------------------------


@pytest.mark.config
@pytest.mark.unit
class TestTenantIdentityConfig:
    def test_accepts_store_record_keys_and_ignores_extra_fields(self):
        config = TenantIdentityConfig.model_validate(TestTenants.record())

        assert config.domain == TestTenants.DOMAIN
        assert config.client_id == TestTenants.CLIENT_ID
        assert config.client_secret == TestTenants.CLIENT_SECRET
        assert config.management_api_endpoint == TestTenants.MANAGEMENT_API

    def test_accepts_attribute_names(self):
        config = TenantIdentityConfig(
            domain="a.example.com",
            client_id="id",
            client_secret="secret",
            management_api_endpoint="https://a.example.com/api/v2/",
        )
        assert config.client_id == "id"

    def test_derived_urls(self):
        config = TenantIdentityConfig.model_validate(TestTenants.record())

        assert config.authorization_url == "https://t.example.com/authorize"
        assert config.token_endpoint == "https://t.example.com/oauth/token"
        assert config.userinfo_endpoint == "https://t.example.com/userinfo"
        assert config.users_endpoint == "https://t.example.com/api/v2/users"

    def test_repr_hides_client_secret(self):
        config = TenantIdentityConfig.model_validate(TestTenants.record())
        assert TestTenants.CLIENT_SECRET not in repr(config)


#                         PROVIDER LIFECYCLE TESTS
# ----------------------------------------------------------------------------


@pytest.mark.config
@pytest.mark.unit
class TestConfigurationProvider:
    @pytest.mark.asyncio
    async def test_load_then_validate_exposes_derived_urls(self, tenant_store):
        provider = ConfigurationProvider(tenant_store)

        await provider.load(TestTenants.KEY)
        provider.validate()

        assert provider.is_valid
        assert provider.token_endpoint == TestTenants.TOKEN_ENDPOINT
        assert provider.users_endpoint == TestTenants.USERS_ENDPOINT
        assert provider.redirect_uri == "http://localhost:3000/api/auth/callback"
        assert tenant_store.lookups == 1

    @pytest.mark.asyncio
    async def test_accessors_fail_before_validation(self, tenant_store):
        provider = ConfigurationProvider(tenant_store)
        await provider.load(TestTenants.KEY)

        with pytest.raises(NotInitializedError):
            provider.token_endpoint

    def test_accessors_fail_before_load(self, tenant_store):
        provider = ConfigurationProvider(tenant_store)

        with pytest.raises(NotInitializedError):
            provider.authorization_url

        with pytest.raises(NotInitializedError):
            provider.validate()

    @pytest.mark.asyncio
    async def test_missing_tenant_raises_fetch_error(self):
        provider = ConfigurationProvider(InMemoryTenantStore())

        with pytest.raises(ConfigFetchError) as exc_info:
            await provider.load("unknown")

        assert "unknown" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_store_failure_is_wrapped_as_fetch_error(self):
        class BrokenStore:
            async def get_record(self, tenant_key):
                raise RuntimeError("connection reset")

        provider = ConfigurationProvider(BrokenStore())

        with pytest.raises(ConfigFetchError) as exc_info:
            await provider.load(TestTenants.KEY)

        assert "connection reset" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_record_fails_validation_and_stays_invalid(self):
        store = InMemoryTenantStore(
            {TestTenants.KEY: TestTenants.record(clientSecret=None)}
        )
        provider = ConfigurationProvider(store)
        await provider.load(TestTenants.KEY)

        with pytest.raises(ConfigValidationError):
            provider.validate()

        assert not provider.is_valid

    @pytest.mark.asyncio
    async def test_describe_never_contains_secret(self, tenant_store):
        provider = ConfigurationProvider(tenant_store, redirect_uri="https://app/cb")
        await provider.load(TestTenants.KEY)
        provider.validate()

        view = provider.describe().model_dump()

        assert view["redirect_uri"] == "https://app/cb"
        assert view["userinfo_endpoint"] == TestTenants.USERINFO_ENDPOINT
        assert "client_secret" not in view
        assert TestTenants.CLIENT_SECRET not in str(view)


#                        DOCUMENT STORE CLIENT TESTS
# ----------------------------------------------------------------------------


def _store_settings(**overrides) -> DocumentStoreSettings:
    values = {
        "endpoint": "https://cloud.example.io/v1/",
        "project_id": "proj-1",
        "api_key": "key-1",
        "database_id": "mcp_hub",
        "collection_id": "auth0_projects",
    }
    values.update(overrides)
    return DocumentStoreSettings(**values)


@pytest.mark.config
@pytest.mark.unit
class TestDocumentStoreClient:
    @pytest.mark.asyncio
    async def test_fetches_document_with_project_headers(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=TestTenants.record())

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        store = DocumentStoreClient(_store_settings(), client)

        record = await store.get_record("printHub")

        assert record["clientId"] == TestTenants.CLIENT_ID
        assert len(seen) == 1
        assert str(seen[0].url) == (
            "https://cloud.example.io/v1/databases/mcp_hub"
            "/collections/auth0_projects/documents/printHub"
        )
        assert seen[0].headers["X-Appwrite-Project"] == "proj-1"
        assert seen[0].headers["X-Appwrite-Key"] == "key-1"

    @pytest.mark.asyncio
    async def test_missing_document_raises_fetch_error(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(
                    404, json={"message": "Document not found"}
                )
            )
        )
        store = DocumentStoreClient(_store_settings(), client)

        with pytest.raises(ConfigFetchError) as exc_info:
            await store.get_record("printHub")

        assert "printHub" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_server_error_includes_store_message(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(401, json={"message": "Invalid API key"})
            )
        )
        store = DocumentStoreClient(_store_settings(), client)

        with pytest.raises(ConfigFetchError) as exc_info:
            await store.get_record("printHub")

        assert "401" in exc_info.value.message
        assert "Invalid API key" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error_raises_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        store = DocumentStoreClient(_store_settings(), client)

        with pytest.raises(ConfigFetchError):
            await store.get_record("printHub")

    @pytest.mark.asyncio
    async def test_unconfigured_endpoint_fails_without_request(self):
        calls = []
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda request: calls.append(request) or httpx.Response(200)
            )
        )
        store = DocumentStoreClient(_store_settings(endpoint=""), client)

        with pytest.raises(ConfigFetchError):
            await store.get_record("printHub")

        assert calls == []
