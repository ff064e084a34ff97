from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from pinstore.exceptions import ConfigurationError, DatabaseUnavailableError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]


class MongoConnectionManager:
    """
    Owns the Mongo client and hands out the database handle.

    ``ensure_connected`` is single-flight: the first caller starts a connection
    attempt and every concurrent caller awaits that same attempt. A failed
    attempt is reported to all of its waiters and then forgotten, so the next
    call starts over.
    """

    def __init__(
        self,
        url: str | None,
        db_name: str,
        *,
        server_selection_timeout_ms: int = 5000,
        client_factory: ClientFactory = AsyncIOMotorClient,
    ):
        self._url = url
        self._db_name = db_name
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client: Any = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def db_name(self) -> str:
        return self._db_name

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    async def ensure_connected(self) -> AsyncIOMotorDatabase:
        if self._database is not None:
            return self._database
        if not self._url:
            logger.error("MongoDB connection string is not configured")
            raise ConfigurationError("Database connection string is not configured")

        if self._pending is None:
            logger.debug("Creating new database connection attempt")
            self._pending = asyncio.get_running_loop().create_task(self._connect())
        pending = self._pending

        try:
            # shield: a cancelled waiter must not cancel the attempt for the others
            database = await asyncio.shield(pending)
        except PyMongoError as exc:
            self._forget(pending)
            logger.error("Database connection failed: %s", exc)
            raise DatabaseUnavailableError("Failed to connect to database", details=str(exc)) from exc
        except asyncio.CancelledError:
            raise
        except Exception:
            self._forget(pending)
            logger.exception("Database connection failed")
            raise

        self._database = database
        return database

    def _forget(self, attempt: asyncio.Task) -> None:
        if self._pending is attempt:
            self._pending = None

    async def _connect(self) -> AsyncIOMotorDatabase:
        client = self._client_factory(
            self._url,
            serverSelectionTimeoutMS=self._server_selection_timeout_ms,
            tz_aware=True,
        )
        try:
            await client.admin.command("ping")
        except Exception:
            client.close()
            raise
        self._client = client
        logger.info("Connected to MongoDB database %r", self._db_name)
        return client[self._db_name]

    async def ping(self) -> bool:
        try:
            database = await self.ensure_connected()
            await database.command("ping")
            return True
        except (PyMongoError, DatabaseUnavailableError, ConfigurationError):
            return False

    async def close(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        if self._client is not None:
            self._client.close()
            logger.debug("Closed MongoDB client")
        self._client = None
        self._database = None
