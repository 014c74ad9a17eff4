"""Create a platform administrator (SUPER_ADMIN) account.

Usage:
    uv run python -m scripts.create_super_admin <email> <first_name> <last_name> [password]
If password is omitted, a generated one is printed once. Requires the RBAC
catalog (run scripts.seed_rbac first). All imports use app.*.
"""

import asyncio
import sys

from app.core.config import get_settings
from app.domain.enums import AccountKind
from app.domain.roles import SystemRoles
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import (
    AccountRepository,
    RoleRepository,
    UserRoleRepository,
)
from app.infrastructure.security.password import hash_password
from app.shared.utils.generators import generate_temporary_password


async def main() -> None:
    if len(sys.argv) < 4:
        print(
            "Usage: uv run python -m scripts.create_super_admin "
            "<email> <first_name> <last_name> [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    email, first_name, last_name = sys.argv[1:4]
    password = sys.argv[4] if len(sys.argv) > 4 else None
    settings = get_settings()
    generated = password is None
    if password is None:
        password = generate_temporary_password(settings.generated_password_length)

    try:
        async with get_session_factory()() as session:
            async with session.begin():
                roles = RoleRepository(session)
                role = await roles.get_by_code(SystemRoles.SUPER_ADMIN)
                if role is None or not role.is_active:
                    print(
                        "SUPER_ADMIN role missing; run scripts.seed_rbac first",
                        file=sys.stderr,
                    )
                    sys.exit(1)
                accounts = AccountRepository(session)
                if await accounts.email_exists(email):
                    print(f"Account already exists: {email}", file=sys.stderr)
                    sys.exit(1)
                account = await accounts.create_account(
                    email=email,
                    hashed_password=hash_password(password),
                    first_name=first_name,
                    last_name=last_name,
                    kind=AccountKind.SUPER_ADMIN.value,
                )
                await UserRoleRepository(session).add(account.id, role.id)
        print(f"Created super admin: {account.id} ({account.email})")
        if generated:
            print(f"Password: {password}")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
