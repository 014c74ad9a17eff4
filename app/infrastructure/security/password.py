"""Password hashing (bcrypt over a SHA-256 pre-hash).

The pre-hash gives bcrypt a fixed 44-byte input, so passwords longer than
bcrypt's 72-byte limit are not silently truncated.
"""

import base64
import hashlib

import bcrypt

from app.core.config import get_settings

# Verified against when the e-mail is unknown, so login timing does not
# reveal which accounts exist.
_DUMMY_HASH: str | None = None


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """Return the bcrypt hash of password.

    Raises:
        ValueError: If password is empty or whitespace.
    """
    if not password or not password.strip():
        raise ValueError("Password must not be empty")
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Return True if plain_password matches hashed_password.

    A missing hash still costs one bcrypt comparison.
    """
    global _DUMMY_HASH
    if not hashed_password:
        if _DUMMY_HASH is None:
            _DUMMY_HASH = hash_password("dummy-password-for-timing")
        bcrypt.checkpw(_prehash(plain_password), _DUMMY_HASH.encode("utf-8"))
        return False
    try:
        return bool(
            bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8"))
        )
    except (ValueError, TypeError):
        return False
