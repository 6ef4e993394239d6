from .base import FunctionRequest, FunctionResponse
from .login import handle_login
from .signup import handle_signup, build_user_metadata
from .profile import handle_profile
from .password_reset import handle_password_reset

__all__ = [
    "FunctionRequest",
    "FunctionResponse",
    "handle_login",
    "handle_signup",
    "build_user_metadata",
    "handle_profile",
    "handle_password_reset",
]
