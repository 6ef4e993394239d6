"""
Exception handlers for the Identity Gateway API.

Function handlers turn their own failures into responses. These handlers cover
what escapes routing and dependency resolution (unknown paths, a gateway that
is not available yet, unexpected crashes) and render it with the same
{error, message[, details]} body, plus the request id.
"""

import logging
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from idp_gateway.exceptions import GatewayError, ProviderHttpError
from idp_gateway.handlers.base import error_response

logger = logging.getLogger(__name__)


HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    500: "INTERNAL_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid4())


def _is_development(request: Request) -> bool:
    state = getattr(request.app.state, "gateway_state", None)
    return bool(state and state.settings.is_development)


def render_error(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    body = error_response(
        status_code, error, message, exc=exc, debug=_is_development(request)
    ).body
    body["request_id"] = _request_id(request)
    return JSONResponse(status_code=status_code, content=body)


async def gateway_exception_handler(
    request: Request,
    exc: GatewayError,
) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"[{_request_id(request)}] {exc.code} on {request.url.path}: {exc.message}")

    content = exc.to_dict()
    if isinstance(exc, ProviderHttpError) and exc.provider_status:
        content["details"]["provider_status"] = exc.provider_status
    if not content["details"]:
        del content["details"]
    content["request_id"] = _request_id(request)

    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    return render_error(
        request,
        exc.status_code,
        HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        str(exc.detail),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    logger.error(
        f"[{_request_id(request)}] Unhandled {type(exc).__name__} "
        f"on {request.method} {request.url.path}",
        exc_info=True,
    )

    return render_error(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred. Please try again later.",
        exc=exc,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
