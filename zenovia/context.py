"""Application context shared by request handlers and startup tasks"""
from dataclasses import dataclass
from typing import Any

from zenovia.catalog import PermissionCatalog, load_permission_catalog
from zenovia.config import Settings
from zenovia.stores import AdminStore, ExpertStore, PermissionStore
from zenovia.utils.jwt_utils import TokenIssuer
from zenovia.utils.logger import logger


@dataclass
class AppContext:
    """Everything one application instance owns.

    Built once by :func:`zenovia.main.create_app` and kept on
    ``app.state.context``; handlers reach it through the dependencies in
    :mod:`zenovia.api.deps`.
    """

    settings: Settings
    database: Any
    catalog: PermissionCatalog
    admins: AdminStore
    permissions: PermissionStore
    experts: ExpertStore
    tokens: TokenIssuer

    @classmethod
    def build(cls, settings: Settings, database: Any) -> "AppContext":
        return cls(
            settings=settings,
            database=database,
            catalog=load_permission_catalog(settings.PERMISSIONS_CATALOG_PATH),
            admins=AdminStore(database.collection(AdminStore.collection_name)),
            permissions=PermissionStore(database.collection(PermissionStore.collection_name)),
            experts=ExpertStore(database.collection(ExpertStore.collection_name)),
            tokens=TokenIssuer(settings),
        )

    async def startup(self) -> None:
        """Connect to the database and create the unique indexes.

        Raises if the database is unreachable, which aborts startup.
        """
        await self.database.connect()
        await self.admins.ensure_indexes()
        await self.permissions.ensure_indexes()
        logger.info(f"Permission catalog version {self.catalog.version} loaded")

    def shutdown(self) -> None:
        self.database.close()
