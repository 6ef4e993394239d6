import logging

from idp_gateway.config import AppSettings
from idp_gateway.exceptions import ManagementTokenError, ProviderHttpError
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


async def handle_password_reset(
    request: FunctionRequest, gateway: IdentityGateway, settings: AppSettings
) -> FunctionResponse:
    """Ask the identity provider to email a password reset link."""
    logger.info(f"[password-reset] {request.method} request received")

    if request.method != "POST":
        return method_not_allowed(["POST"])

    email = request.body.get("email")
    if not email:
        return validation_error("Email is required")

    try:
        await ensure_ready(gateway, settings, "password-reset")

        logger.info("[password-reset] Sending password reset email...")
        await gateway.send_password_reset_email(email)
        logger.info("[password-reset] Password reset email sent")

        return json_response(
            {
                "success": True,
                "message": "Password reset email sent. Please check your inbox.",
                "email": email,
            }
        )

    except ProviderHttpError as e:
        # 400 only when the provider answered and rejected the email
        if isinstance(e, ManagementTokenError) or e.provider_status is None:
            logger.error(f"[password-reset] Error: {e}")
            return error_response(
                500, "Password Reset Error", str(e), exc=e, debug=settings.is_development
            )

        logger.warning(f"[password-reset] Failed: {e}")
        return error_response(400, "Password Reset Failed", e.message)

    except Exception as e:
        logger.error(f"[password-reset] Error: {e}")
        return error_response(
            500, "Password Reset Error", str(e), exc=e, debug=settings.is_development
        )
