"""
Authentication: password hashing, JWT handling and authority checks.
"""

from onlinejudge.auth.passwords import hash_password, verify_password
from onlinejudge.auth.jwt_handler import (
    create_access_token,
    verify_token,
    get_current_user,
    require_privileged,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "verify_token",
    "get_current_user",
    "require_privileged",
]
