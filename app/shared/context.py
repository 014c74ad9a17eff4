"""Request context management using contextvars.

Provides async-safe storage for request-scoped data: the acting account
(used as the default assigned_by / granted_by / created_by on audited rows)
and the request id (attached to log records).

Usage:
    set_current_user("acc123")
    actor_id = get_current_actor_id()

Scripts and background jobs never set an actor, so audit columns stay NULL
for system actions.
"""

from contextvars import ContextVar

_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)
_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_current_user(user_id: str) -> None:
    """Set the acting account for this request (called after authentication).

    Raises:
        ValueError: If user_id is empty.
    """
    if not user_id:
        raise ValueError("user_id is required")
    _current_user_id.set(user_id)


def clear_current_user() -> None:
    _current_user_id.set(None)


def get_current_actor_id() -> str | None:
    """Return the acting account id, or None for system actions."""
    return _current_user_id.get()


def set_request_id(request_id: str | None) -> None:
    _request_id.set(request_id)


def get_request_id() -> str | None:
    return _request_id.get()
