"""
Login handler.

Without a code in the body the handler returns the provider's authorization
URL (start of the flow); with a code it exchanges the code for tokens
(callback leg of the flow).
"""

import logging

from idp_gateway.config import AppSettings
from idp_gateway.services.identity import DEFAULT_SCOPE, DEFAULT_STATE, IdentityGateway
from .base import (
    FunctionRequest,
    FunctionResponse,
    ensure_ready,
    error_response,
    json_response,
    method_not_allowed,
)

logger = logging.getLogger(__name__)


async def handle_login(
    request: FunctionRequest, gateway: IdentityGateway, settings: AppSettings
) -> FunctionResponse:
    logger.info(f"[login] {request.method} request received")

    if request.method != "POST":
        return method_not_allowed(["POST"])

    try:
        await ensure_ready(gateway, settings, "login")

        code = request.body.get("code")
        state = request.body.get("state") or DEFAULT_STATE

        if code:
            logger.info("[login] Exchanging authorization code for tokens...")
            tokens = await gateway.exchange_code_for_token(code)
            logger.info("[login] Token exchange successful")

            return json_response(
                {
                    "success": True,
                    "accessToken": tokens.access_token,
                    "idToken": tokens.id_token,
                    "refreshToken": tokens.refresh_token,
                    "expiresIn": tokens.expires_in,
                    "tokenType": tokens.token_type,
                }
            )

        logger.info("[login] Generating authorization URL...")
        authorization_url = gateway.generate_authorization_url(state, DEFAULT_SCOPE)

        return json_response(
            {
                "success": True,
                "authorizationUrl": authorization_url,
                "state": state,
            }
        )

    except Exception as e:
        logger.error(f"[login] Error: {e}")
        return error_response(
            500, "Authentication Error", str(e), exc=e, debug=settings.is_development
        )
