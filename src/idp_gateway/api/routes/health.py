from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from idp_gateway.api.dependencies import AppState, AppStateDep, SettingsDep
from idp_gateway.api.schema import HealthResponse, DetailedHealthResponse


router = APIRouter(tags=["Health"])


def _component(healthy: bool, **info: Any) -> Dict[str, Any]:
    return {"status": "healthy" if healthy else "unhealthy", **info}


def _gateway_component(state: AppState, tenant_key: str) -> Dict[str, Any]:
    gateway = state.gateway
    if gateway is None:
        return _component(False, initialized=False, tenant_key=tenant_key)

    # Not initialized yet is fine: the first auth request runs init
    info: Dict[str, Any] = {"initialized": gateway.is_ready(), "tenant_key": tenant_key}
    if gateway.is_ready():
        view = gateway.get_config()
        info["domain"] = view.domain
        info["client_id"] = view.client_id
    return _component(True, **info)


@router.get("/")
async def root(settings: SettingsDep):
    return {"message": f"Welcome to {settings.app_name}"}


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep):
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(settings: SettingsDep, state: AppStateDep):
    http_open = state.http_client is not None and not state.http_client.is_closed

    components = {
        "http_client": _component(http_open, open=http_open),
        "tenant_store": _component(
            state.store is not None,
            backend=type(state.store).__name__ if state.store is not None else None,
        ),
        "gateway": _gateway_component(state, settings.tenant_key),
    }

    all_healthy = all(c["status"] == "healthy" for c in components.values())

    return DetailedHealthResponse(
        status="healthy" if all_healthy else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
        components=components,
    )


@router.get("/health/live")
async def liveness_check():
    return {"status": "alive"}
