"""
Profile handler.

GET reads a profile by user id or, failing that, by email.
PATCH applies a partial update to a user.
"""

import logging
from typing import Any, Dict

from idp_gateway.config import AppSettings
from idp_gateway.exceptions import UserNotFoundError, ValidationError
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


def _profile_view(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "userId": user.get("user_id"),
        "email": user.get("email"),
        "emailVerified": user.get("email_verified"),
        "name": user.get("name"),
        "picture": user.get("picture"),
        "nickname": user.get("nickname"),
        "metadata": user.get("user_metadata") or {},
        "createdAt": user.get("created_at"),
        "updatedAt": user.get("updated_at"),
        "lastLogin": user.get("last_login"),
    }


def _updated_view(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "userId": user.get("user_id"),
        "email": user.get("email"),
        "emailVerified": user.get("email_verified"),
        "metadata": user.get("user_metadata") or {},
        "updatedAt": user.get("updated_at"),
    }


async def _get_profile(
    request: FunctionRequest, gateway: IdentityGateway, settings: AppSettings
) -> FunctionResponse:
    user_id = request.query.get("userId")
    email = request.query.get("email")

    if not user_id and not email:
        return validation_error("Either userId or email is required")

    await ensure_ready(gateway, settings, "profile")
    logger.info("[profile] Fetching profile...")

    if user_id:
        user = await gateway.get_user(user_id)
    else:
        users = await gateway.find_users_by_email(email)
        if not users:
            raise UserNotFoundError(f"No user found with email: {email}")
        user = users[0]

    logger.info("[profile] Profile retrieved")
    return json_response({"success": True, "user": _profile_view(user)})


async def _update_profile(
    request: FunctionRequest, gateway: IdentityGateway, settings: AppSettings
) -> FunctionResponse:
    user_id = request.body.get("userId")
    updates = request.body.get("updates")

    if not user_id or updates is None:
        return validation_error("userId and updates are required")

    await ensure_ready(gateway, settings, "profile")
    logger.info(f"[profile] Updating profile for: {user_id}...")

    updated_user = await gateway.update_user(user_id, updates)

    logger.info("[profile] Profile updated")
    return json_response(
        {
            "success": True,
            "message": "Profile updated successfully",
            "user": _updated_view(updated_user),
        }
    )


async def handle_profile(
    request: FunctionRequest, gateway: IdentityGateway, settings: AppSettings
) -> FunctionResponse:
    logger.info(f"[profile] {request.method} request received")

    if request.method not in ("GET", "PATCH"):
        return method_not_allowed(["GET", "PATCH"])

    try:
        if request.method == "GET":
            return await _get_profile(request, gateway, settings)
        return await _update_profile(request, gateway, settings)

    except UserNotFoundError as e:
        logger.info(f"[profile] {e.message}")
        return error_response(404, "User Not Found", e.message)

    except ValidationError as e:
        return validation_error(e.message)

    except Exception as e:
        logger.error(f"[profile] Error: {e}")
        return error_response(
            500,
            "Profile Operation Error",
            str(e),
            exc=e,
            debug=settings.is_development,
        )
