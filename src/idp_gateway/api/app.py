from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from idp_gateway.api.dependencies import AppState, app_lifespan
from idp_gateway.api.exception_handlers import register_exception_handlers
from idp_gateway.api.routes import api_router, health_router_root


def create_application(state: Optional[AppState] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        state: Pre-built application state; tests pass one with a fake tenant
            store and a mocked HTTP transport.
    """
    state = state or AppState()
    settings = state.settings

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=app_lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
    )
    app.state.gateway_state = state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    @app.middleware("http")
    async def assign_request_id(request: Request, call_next):
        request.state.request_id = request.headers.get("x-request-id") or str(uuid4())
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response

    register_exception_handlers(app)

    app.include_router(health_router_root)
    app.include_router(api_router)

    return app
