"""
HTTP routes for the auth functions.

Every route accepts any method and hands the request to its function handler,
which owns method checks, validation and error mapping.
"""

import json
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from idp_gateway.api.dependencies import GatewayDep, SettingsDep
from idp_gateway.handlers import (
    FunctionRequest,
    FunctionResponse,
    handle_login,
    handle_password_reset,
    handle_profile,
    handle_signup,
)


FUNCTION_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


router = APIRouter()


async def to_function_request(request: Request) -> FunctionRequest:
    body: Dict[str, Any] = {}
    raw = await request.body()
    if raw:
        try:
            body = json.loads(raw)
        except ValueError:
            body = {}

    return FunctionRequest(
        method=request.method,
        body=body,
        query=dict(request.query_params),
    )


def to_json_response(result: FunctionResponse) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.api_route("/login", methods=FUNCTION_METHODS)
async def login(request: Request, gateway: GatewayDep, settings: SettingsDep):
    result = await handle_login(await to_function_request(request), gateway, settings)
    return to_json_response(result)


@router.api_route("/signup", methods=FUNCTION_METHODS)
async def signup(request: Request, gateway: GatewayDep, settings: SettingsDep):
    result = await handle_signup(await to_function_request(request), gateway, settings)
    return to_json_response(result)


@router.api_route("/profile", methods=FUNCTION_METHODS)
async def profile(request: Request, gateway: GatewayDep, settings: SettingsDep):
    result = await handle_profile(await to_function_request(request), gateway, settings)
    return to_json_response(result)


@router.api_route("/password-reset", methods=FUNCTION_METHODS)
async def password_reset(request: Request, gateway: GatewayDep, settings: SettingsDep):
    result = await handle_password_reset(
        await to_function_request(request), gateway, settings
    )
    return to_json_response(result)
