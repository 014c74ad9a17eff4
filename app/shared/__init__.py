"""Shared utilities: request context, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.context import (
    clear_current_user,
    get_current_actor_id,
    get_request_id,
    set_current_user,
    set_request_id,
)
from app.shared.utils import (
    ensure_utc,
    generate_cuid,
    generate_temporary_password,
    utc_now,
)

__all__ = [
    "clear_current_user",
    "ensure_utc",
    "generate_cuid",
    "generate_temporary_password",
    "get_current_actor_id",
    "get_request_id",
    "set_current_user",
    "set_request_id",
    "utc_now",
]
