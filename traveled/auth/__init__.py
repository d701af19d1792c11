# Auth package
from .dependencies import AuthUser, get_current_user
from .utils import create_access_token, verify_token

__all__ = [
    "AuthUser",
    "get_current_user",
    "create_access_token",
    "verify_token",
]
