from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, ReturnDocument


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileRepository:
    """Mongo access for file metadata records (collection ``files``)."""

    def __init__(self, collection_name: str = "files", *, now: Callable[[], datetime] = _utcnow):
        self.collection_name = collection_name
        self._now = now

    async def ensure_indexes(self, db) -> None:
        await db[self.collection_name].create_index(
            [("walletAddress", ASCENDING), ("createdAt", DESCENDING)]
        )
        await db[self.collection_name].create_index(
            [("cid", ASCENDING), ("walletAddress", ASCENDING)]
        )

    async def create(self, db, data: Dict[str, Any]) -> Dict[str, Any]:
        ts = self._now()
        doc = {**data, "createdAt": ts, "updatedAt": ts}
        result = await db[self.collection_name].insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def list_for_wallet(self, db, wallet_address: str) -> List[Dict[str, Any]]:
        cursor = db[self.collection_name].find({"walletAddress": wallet_address}).sort(
            "createdAt", DESCENDING
        )
        return await cursor.to_list(length=None)

    async def get(self, db, cid: str, wallet_address: str) -> Optional[Dict[str, Any]]:
        return await db[self.collection_name].find_one({"cid": cid, "walletAddress": wallet_address})

    async def delete(self, db, cid: str, wallet_address: str) -> int:
        result = await db[self.collection_name].delete_one({"cid": cid, "walletAddress": wallet_address})
        return result.deleted_count


class StorageAccountRepository:
    """Per-wallet storage counters (collection ``users``)."""

    def __init__(self, collection_name: str = "users"):
        self.collection_name = collection_name

    async def ensure_indexes(self, db) -> None:
        await db[self.collection_name].create_index("walletAddress", unique=True)

    async def add_usage(self, db, wallet_address: str, delta: int) -> Optional[Dict[str, Any]]:
        """Increment usage, creating the account on first use. Returns the updated account."""
        return await db[self.collection_name].find_one_and_update(
            {"walletAddress": wallet_address},
            {
                "$inc": {"totalStorageUsed": delta},
                "$setOnInsert": {"walletAddress": wallet_address},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    async def release_usage(self, db, wallet_address: str, amount: int) -> Optional[Dict[str, Any]]:
        """Decrement usage of an existing account. No floor is applied."""
        return await db[self.collection_name].find_one_and_update(
            {"walletAddress": wallet_address},
            {"$inc": {"totalStorageUsed": -amount}},
            return_document=ReturnDocument.AFTER,
        )

    async def get(self, db, wallet_address: str) -> Optional[Dict[str, Any]]:
        return await db[self.collection_name].find_one({"walletAddress": wallet_address})
