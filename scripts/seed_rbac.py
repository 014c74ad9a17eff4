"""Seed the permission catalog, global system roles and ward roles.

Usage:
    uv run python -m scripts.seed_rbac [--create-tables]
Idempotent: rerunning only inserts what is missing. --create-tables runs
Base.metadata.create_all first (local and test databases). All imports use app.*.
"""

import asyncio
import sys

from app.core.config import get_settings
from app.infrastructure.persistence.database import (
    dispose_engine,
    get_session_factory,
    init_models,
)
from app.infrastructure.services.catalog_seeder import CatalogSeeder
from app.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Seed the RBAC catalog in one transaction."""
    get_settings()
    setup_logging()
    if "--create-tables" in sys.argv[1:]:
        await init_models()

    try:
        async with get_session_factory()() as session:
            async with session.begin():
                result = await CatalogSeeder(session).seed()
        print(
            f"Seeded RBAC: {result.permissions_created} permissions, "
            f"{result.roles_created} roles, {result.bindings_created} bindings created"
        )
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
