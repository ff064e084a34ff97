from .mongo import MongoConnectionManager
from .repository import FileRepository, StorageAccountRepository

__all__ = ["MongoConnectionManager", "FileRepository", "StorageAccountRepository"]
