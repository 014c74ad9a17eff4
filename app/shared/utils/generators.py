"""ID and value generators (CUID, temporary passwords)."""

import secrets
import string

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

_PASSWORD_SPECIAL = "!@#$%^&*-_=+"


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_temporary_password(length: int = 16) -> str:
    """Generate a cryptographically secure temporary password.

    Used when an account is provisioned without a password (parishioner
    creation, bulk family members). Guarantees one lowercase, one uppercase,
    one digit and one special character; the rest is drawn from the full
    alphabet and shuffled.
    """
    alphabet = string.ascii_letters + string.digits + _PASSWORD_SPECIAL
    rng = secrets.SystemRandom()
    chars = [
        rng.choice(string.ascii_lowercase),
        rng.choice(string.ascii_uppercase),
        rng.choice(string.digits),
        rng.choice(_PASSWORD_SPECIAL),
    ]
    chars.extend(rng.choice(alphabet) for _ in range(max(0, length - 4)))
    rng.shuffle(chars)
    return "".join(chars)
