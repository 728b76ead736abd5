"""Startup seeding of baseline admins and permissions.

Every task is safe to run any number of times: records are looked up before
they are inserted, and the unique indexes on ``admins.email`` and
``permissions.key`` reject an insert that loses a race with another seeder.
Any failure is logged and never aborts startup.
"""
from typing import TYPE_CHECKING, List, Optional

from pymongo.errors import DuplicateKeyError

from zenovia.catalog import PermissionCatalog
from zenovia.config import Settings
from zenovia.models import Admin
from zenovia.stores import AdminStore, PermissionStore
from zenovia.utils.logger import logger

if TYPE_CHECKING:
    from zenovia.context import AppContext

DEMO_ADMIN_NAME = "Demo Admin"
DEMO_ADMIN_EMAIL = "admin@zenovia.com"
DEMO_ADMIN_PASSWORD = "admin123"


async def seed_initial_admin(admins: AdminStore, settings: Settings) -> Optional[Admin]:
    """Create the primary superadmin from INIT_ADMIN_* settings if absent"""
    email = settings.INIT_ADMIN_EMAIL
    password = settings.INIT_ADMIN_PASSWORD
    if not email or not password:
        return None

    try:
        if await admins.email_exists(email):
            logger.info(f"Initial admin already exists: {email}", extra={"email": email})
            return None

        admin = await admins.create(
            name=settings.INIT_ADMIN_NAME,
            email=email,
            password=password,
            role="superadmin",
            is_primary=True,
        )
    except DuplicateKeyError:
        logger.info(f"Initial admin already exists: {email}", extra={"email": email})
        return None
    except Exception as exc:
        logger.error(f"Failed to seed initial admin: {exc}", extra={"email": email}, exc_info=True)
        return None

    logger.info(f"Seeded initial superadmin: {admin.email}", extra={"email": admin.email})
    return admin


async def seed_dev_demo_admin(admins: AdminStore, settings: Settings) -> Optional[Admin]:
    """Create a non-primary demo superadmin, in development only"""
    if not settings.is_development:
        return None

    try:
        if await admins.email_exists(DEMO_ADMIN_EMAIL):
            return None

        admin = await admins.create(
            name=DEMO_ADMIN_NAME,
            email=DEMO_ADMIN_EMAIL,
            password=DEMO_ADMIN_PASSWORD,
            role="superadmin",
            is_primary=False,
        )
    except DuplicateKeyError:
        return None
    except Exception as exc:
        logger.error(f"Failed to seed dev demo admin: {exc}", exc_info=True)
        return None

    logger.info(f"Seeded development demo admin: {admin.email}", extra={"email": admin.email})
    return admin


async def seed_default_permissions(
    permissions: PermissionStore, catalog: PermissionCatalog
) -> List[str]:
    """Create every catalog permission that is missing.

    Returns the keys created.  A failure stops the remaining entries of
    this run; they are picked up on the next start.
    """
    created: List[str] = []
    try:
        for entry in catalog.permissions:
            if await permissions.key_exists(entry.key):
                continue
            try:
                await permissions.create(entry.key, entry.label)
            except DuplicateKeyError:
                continue
            created.append(entry.key)
            logger.info(f"Seeded permission: {entry.key}", extra={"key": entry.key})
    except Exception as exc:
        logger.error(f"Failed to seed default permissions: {exc}", exc_info=True)

    return created


async def run_seeds(context: "AppContext") -> None:
    """Run every seed task; awaited before the server accepts requests"""
    await seed_initial_admin(context.admins, context.settings)
    await seed_dev_demo_admin(context.admins, context.settings)
    await seed_default_permissions(context.permissions, context.catalog)
