"""MongoDB connection"""
from typing import Any

import motor.motor_asyncio

from zenovia.config import Settings
from zenovia.utils.logger import logger


class Database:
    """The single shared MongoDB client and database of an application.

    The motor client connects lazily, so :meth:`connect` pings the server to
    surface an unreachable database at startup rather than on the first
    request.
    """

    def __init__(self, client: motor.motor_asyncio.AsyncIOMotorClient, name: str) -> None:
        self._client = client
        self._db = client[name]
        self.name = name

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        client = motor.motor_asyncio.AsyncIOMotorClient(
            settings.MONGODB_URI,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
            tz_aware=True,
        )
        default = client.get_default_database(default=settings.MONGODB_DB_NAME)
        return cls(client, default.name)

    def collection(self, name: str) -> Any:
        return self._db[name]

    async def ping(self) -> None:
        await self._client.admin.command("ping")

    async def connect(self) -> None:
        """Verify the server is reachable. Raises on failure."""
        await self.ping()
        logger.info(f"MongoDB connected: {self.name}")

    def close(self) -> None:
        self._client.close()
        logger.info("MongoDB connection closed")
