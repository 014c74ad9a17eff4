"""Security: access tokens and password hashing."""

from app.infrastructure.security.jwt import TokenClaims, create_access_token, verify_token
from app.infrastructure.security.password import hash_password, verify_password

__all__ = [
    "TokenClaims",
    "create_access_token",
    "hash_password",
    "verify_password",
    "verify_token",
]
