import logging
from typing import Any, Dict, Optional

from idp_gateway.config import AppSettings
from idp_gateway.services.identity import IdentityGateway
from .base import (
    FunctionRequest,
    FunctionResponse,
    ensure_ready,
    error_response,
    json_response,
    method_not_allowed,
    validation_error,
)

logger = logging.getLogger(__name__)


def build_user_metadata(
    first_name: Optional[str],
    last_name: Optional[str],
    metadata: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    """Merge name fields with caller metadata; metadata keys win on collision."""
    return {
        "firstName": first_name or "",
        "lastName": last_name or "",
        **(metadata or {}),
    }


async def handle_signup(
    request: FunctionRequest, gateway: IdentityGateway, settings: AppSettings
) -> FunctionResponse:
    """Create a user through the Management API."""
    logger.info(f"[signup] {request.method} request received")

    if request.method != "POST":
        return method_not_allowed(["POST"])

    body = request.body
    email = body.get("email")
    password = body.get("password")
    metadata = body.get("metadata")

    if not email or not password:
        return validation_error("Email and password are required")

    if metadata is not None and not isinstance(metadata, dict):
        return validation_error("metadata must be an object")

    try:
        await ensure_ready(gateway, settings, "signup")

        logger.info("[signup] Creating user...")
        new_user = await gateway.create_user(
            email,
            password,
            build_user_metadata(body.get("firstName"), body.get("lastName"), metadata),
        )
        logger.info(f"[signup] User created: {new_user.get('user_id')}")

        return json_response(
            {
                "success": True,
                "user": {
                    "userId": new_user.get("user_id"),
                    "email": new_user.get("email"),
                    "emailVerified": new_user.get("email_verified"),
                    "createdAt": new_user.get("created_at"),
                },
                "message": "User created successfully. Please verify your email.",
            },
            status_code=201,
        )

    except Exception as e:
        logger.error(f"[signup] Error: {e}")
        return error_response(
            500, "Signup Error", str(e), exc=e, debug=settings.is_development
        )
