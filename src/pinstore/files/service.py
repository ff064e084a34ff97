"""File metadata operations: create, list and delete records per wallet.

Every operation goes through the connection manager first, then the
repositories. Mutations invalidate the wallet's list cache entry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from pymongo.errors import PyMongoError

from pinstore.cache import ListCache
from pinstore.db.mongo import MongoConnectionManager
from pinstore.db.repository import FileRepository, StorageAccountRepository
from pinstore.exceptions import InvalidRequestError, NotFoundError, PersistenceError

from .formatting import MAX_SIZE_BYTES, format_size, parse_size
from .models import FileCreateRequest

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("fileName", "cid", "size", "mimeType")


def to_json(doc: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-ready copy of a Mongo document: ObjectIds become strings, datetimes ISO strings."""
    return jsonable_encoder(doc, custom_encoder={ObjectId: str})


def decorate(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Listing view of a record: string ``_id``, ``lastUpdate`` and ``formattedSize``."""
    return to_json(
        {
            **doc,
            "_id": str(doc["_id"]),
            "lastUpdate": doc.get("updatedAt") or doc.get("createdAt"),
            "formattedSize": format_size(doc.get("size")),
        }
    )


class FileMetadataService:
    def __init__(
        self,
        connection: MongoConnectionManager,
        cache: ListCache,
        *,
        files: FileRepository | None = None,
        accounts: StorageAccountRepository | None = None,
    ):
        self.connection = connection
        self.cache = cache
        self.files = files or FileRepository()
        self.accounts = accounts or StorageAccountRepository()
        self._indexes_ready = False

    async def _db(self):
        db = await self.connection.ensure_connected()
        if not self._indexes_ready:
            try:
                await self.files.ensure_indexes(db)
                await self.accounts.ensure_indexes(db)
            except PyMongoError:
                logger.warning("Could not create indexes, continuing without them", exc_info=True)
            else:
                self._indexes_ready = True
        return db

    async def create(self, payload: FileCreateRequest) -> Dict[str, Any]:
        wallet_address = payload.walletAddress
        logger.debug("Received file metadata: %s", payload.model_dump())

        if not wallet_address:
            raise InvalidRequestError("Wallet address is required")
        missing = [name for name in _REQUIRED_FIELDS if not getattr(payload, name)]
        if missing:
            raise InvalidRequestError("Missing required fields", details={"missing": missing})

        size_in_bytes = parse_size(payload.size)
        if size_in_bytes is None or not 0 <= size_in_bytes <= MAX_SIZE_BYTES:
            raise InvalidRequestError("Invalid file size", details={"size": payload.size})

        db = await self._db()
        try:
            record = await self.files.create(
                db,
                {
                    "fileName": payload.fileName,
                    "cid": payload.cid,
                    "size": str(payload.size),
                    "mimeType": payload.mimeType,
                    "walletAddress": wallet_address,
                },
            )
        except PyMongoError as exc:
            logger.error("Failed to store file metadata for %s: %s", wallet_address, exc)
            raise PersistenceError("Failed to store file metadata", details=str(exc)) from exc

        try:
            account = await self.accounts.add_usage(db, wallet_address, size_in_bytes)
        except PyMongoError as exc:
            logger.error("Failed to update storage usage for %s: %s", wallet_address, exc)
            raise PersistenceError("Failed to update user storage", details=str(exc)) from exc
        if account is None:
            logger.error("Storage usage upsert returned no account for %s", wallet_address)
            raise PersistenceError("Failed to update user storage")

        await self.cache.invalidate(wallet_address)
        logger.debug(
            "Stored file %s for %s, total usage now %s",
            payload.cid, wallet_address, account.get("totalStorageUsed"),
        )
        return to_json({**record, "_id": str(record["_id"])})

    async def list(self, wallet_address: str | None) -> List[Dict[str, Any]]:
        if not wallet_address:
            raise InvalidRequestError("Wallet address is required")

        cached = await self.cache.get(wallet_address)
        if cached is not None:
            logger.debug("Returning cached files (%d) for wallet %s", len(cached), wallet_address)
            return cached

        db = await self._db()
        try:
            docs = await self.files.list_for_wallet(db, wallet_address)
        except PyMongoError as exc:
            logger.error("Failed to fetch files for %s: %s", wallet_address, exc)
            raise PersistenceError("Failed to fetch files", details=str(exc)) from exc

        files = [decorate(doc) for doc in docs]
        await self.cache.set(wallet_address, files)
        logger.debug("Found %d files for wallet %s", len(files), wallet_address)
        return files

    async def delete(self, cid: str | None, wallet_address: str | None) -> None:
        if not cid or not wallet_address:
            raise InvalidRequestError("CID and wallet address are required")

        db = await self._db()
        try:
            record = await self.files.get(db, cid, wallet_address)
            if record is None:
                raise NotFoundError("File not found or unauthorized")
            await self.files.delete(db, cid, wallet_address)
            size_in_bytes = parse_size(record.get("size")) or 0
            account = await self.accounts.release_usage(db, wallet_address, size_in_bytes)
        except PyMongoError as exc:
            logger.error("Failed to delete file %s for %s: %s", cid, wallet_address, exc)
            raise PersistenceError("Failed to delete file", details=str(exc)) from exc

        if account is not None and account.get("totalStorageUsed", 0) < 0:
            logger.warning(
                "Storage usage for %s went negative (%s)", wallet_address, account["totalStorageUsed"]
            )
        await self.cache.invalidate(wallet_address)
        logger.debug("Deleted file %s for wallet %s", cid, wallet_address)

    async def usage(self, wallet_address: str | None) -> int:
        """Current ``totalStorageUsed`` for a wallet, 0 when it has no account yet."""
        if not wallet_address:
            raise InvalidRequestError("Wallet address is required")
        db = await self._db()
        try:
            account = await self.accounts.get(db, wallet_address)
        except PyMongoError as exc:
            logger.error("Failed to read storage usage for %s: %s", wallet_address, exc)
            raise PersistenceError("Failed to read storage usage", details=str(exc)) from exc
        return int(account.get("totalStorageUsed", 0)) if account else 0
