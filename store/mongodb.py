"""
MongoDB document store backend.
Keeps an integer ``_version`` field on every document and performs
conditional replaces filtered on that field.
"""

from typing import Any, Dict, Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from store.base import (
    DocumentNotFound,
    DocumentStore,
    StoredDocument,
    StoreError,
    VersionConflict,
)

logger = structlog.get_logger(__name__)

VERSION_FIELD = "_version"


class MongoDocumentStore(DocumentStore):
    """
    Async MongoDB document store.
    Each collection name maps to a MongoDB collection; documents are keyed by ``_id``.
    """

    def __init__(
        self,
        connection_url: str = "mongodb://localhost:27017",
        database_name: str = "booklists",
        database: Optional[AsyncIOMotorDatabase] = None
    ):
        """
        Initialize MongoDB store.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            database: Pre-built database handle, mainly for tests
        """
        self.client: Optional[AsyncIOMotorClient] = None
        if database is None:
            self.client = AsyncIOMotorClient(connection_url)
            database = self.client[database_name]
        self.database = database

    async def get(self, collection: str, key: str) -> StoredDocument:
        try:
            document = await self.database[collection].find_one({"_id": key})
        except PyMongoError as e:
            logger.error("MongoDB read failed", collection=collection, key=key, error=str(e))
            raise StoreError(f"MongoDB read failed: {e}") from e

        if document is None:
            raise DocumentNotFound(f"Document '{key}' not found in '{collection}'")

        version = document.pop(VERSION_FIELD, 0)
        document.pop("_id", None)
        return StoredDocument(key=key, source=document, version=version)

    async def put(
        self,
        collection: str,
        key: str,
        source: Dict[str, Any],
        version: int
    ) -> Dict[str, Any]:
        new_version = version + 1
        replacement = {**source, VERSION_FIELD: new_version}
        replacement.pop("_id", None)

        version_filter = {"_id": key, VERSION_FIELD: version}
        if version == 0:
            # documents created outside this service may not carry a version yet
            version_filter = {"_id": key, "$or": [{VERSION_FIELD: 0}, {VERSION_FIELD: {"$exists": False}}]}

        try:
            result = await self.database[collection].replace_one(version_filter, replacement)
            if result.matched_count == 0:
                exists = await self.database[collection].count_documents({"_id": key}, limit=1)
        except PyMongoError as e:
            logger.error("MongoDB write failed", collection=collection, key=key, error=str(e))
            raise StoreError(f"MongoDB write failed: {e}") from e

        if result.matched_count == 0:
            if not exists:
                raise DocumentNotFound(f"Document '{key}' not found in '{collection}'")
            raise VersionConflict(
                f"Document '{key}' in '{collection}' changed since version {version}"
            )

        return {
            "_index": collection,
            "_id": key,
            "_version": new_version,
            "result": "updated",
        }

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.database.command("ping")
            return {"status": "healthy"}
        except PyMongoError as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }

    async def close(self) -> None:
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")
