"""
Shared request/response types and helpers for the function handlers.

A handler receives a FunctionRequest (method, parsed JSON body, query string)
and always returns a FunctionResponse; exceptions never escape to the
transport layer.
"""

import logging
import traceback
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from idp_gateway.config import AppSettings
from idp_gateway.services.identity import IdentityGateway

logger = logging.getLogger(__name__)


class FunctionRequest(BaseModel):
    """Framework-neutral inbound request."""

    method: str
    body: Dict[str, Any] = Field(default_factory=dict)
    query: Dict[str, str] = Field(default_factory=dict)

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        return v.upper()

    @field_validator("body", mode="before")
    @classmethod
    def coerce_body(cls, v: Any) -> Any:
        # Non-object JSON bodies carry no usable fields
        return v if isinstance(v, dict) else {}


class FunctionResponse(BaseModel):
    status_code: int = 200
    body: Dict[str, Any] = Field(default_factory=dict)


def json_response(body: Dict[str, Any], status_code: int = 200) -> FunctionResponse:
    return FunctionResponse(status_code=status_code, body=body)


def error_response(
    status_code: int,
    error: str,
    message: str,
    exc: Optional[BaseException] = None,
    debug: bool = False,
) -> FunctionResponse:
    """Create a standardized error body; tracebacks only in development mode."""
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
    }
    if debug and exc is not None:
        content["details"] = traceback.format_exception(
            type(exc), exc, exc.__traceback__
        )
    return FunctionResponse(status_code=status_code, body=content)


def method_not_allowed(allowed: Iterable[str]) -> FunctionResponse:
    allowed = list(allowed)
    if len(allowed) == 1:
        message = f"Only {allowed[0]} requests are allowed"
    else:
        message = f"Only {' and '.join(allowed)} requests are allowed"
    return error_response(405, "Method Not Allowed", message)


def validation_error(message: str) -> FunctionResponse:
    return error_response(400, "Validation Error", message)


async def ensure_ready(
    gateway: IdentityGateway, settings: AppSettings, handler_name: str
) -> None:
    """Initialize the gateway on first use."""
    if not gateway.is_ready():
        logger.info(f"[{handler_name}] Initializing identity gateway...")
        await gateway.init(settings.tenant_key)
