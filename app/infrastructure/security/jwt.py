"""Access tokens for authenticated accounts.

Claims: ``sub`` (account id), ``kind``, ``parish_id`` and ``adm`` (tenant
administrator flag). The API re-reads the account on each request, so the
claims are hints for clients; authorization always uses stored state.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.application.dtos.account import AccountResult
from app.core.config import get_settings


@dataclass(frozen=True)
class TokenClaims:
    account_id: str
    kind: str | None
    parish_id: str | None
    is_tenant_admin: bool
    expires_at: datetime


def create_access_token(
    account: AccountResult,
    expires_delta: timedelta | None = None,
) -> tuple[str, datetime]:
    """Return (encoded JWT, expiry) for account.

    Args:
        account: The authenticated account.
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.
    """
    settings = get_settings()
    expire = datetime.now(UTC) + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims: dict[str, Any] = {
        "sub": account.id,
        "kind": account.kind,
        "parish_id": account.parish_id,
        "adm": account.is_tenant_admin,
        "exp": expire,
    }
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded), expire


def verify_token(token: str) -> TokenClaims:
    """Verify and decode a JWT.

    Raises:
        ValueError: If the token is invalid, expired or missing sub/exp.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    sub = payload.get("sub")
    if not sub:
        raise ValueError("Token missing required claim: sub")
    return TokenClaims(
        account_id=str(sub),
        kind=payload.get("kind"),
        parish_id=payload.get("parish_id"),
        is_tenant_admin=bool(payload.get("adm", False)),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )
