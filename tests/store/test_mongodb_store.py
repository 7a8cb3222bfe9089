"""
Tests for the MongoDB document store.
Uses mocked motor collections.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, Mock
from pymongo.errors import ServerSelectionTimeoutError

from store.base import DocumentNotFound, StoreError, VersionConflict
from store.mongodb import MongoDocumentStore


@pytest.fixture
def collection():
    collection = MagicMock()
    collection.find_one = AsyncMock()
    collection.replace_one = AsyncMock(return_value=Mock(matched_count=1))
    collection.count_documents = AsyncMock(return_value=1)
    return collection


@pytest.fixture
def database(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    database.command = AsyncMock(return_value={"ok": 1})
    return database


@pytest.fixture
def store(database):
    return MongoDocumentStore(database=database)


class TestMongoDocumentStore:
    """Test cases for MongoDocumentStore."""

    @pytest.mark.asyncio
    async def test_get_strips_bookkeeping_fields(self, store, collection):
        """Test that _id and _version are not part of the source."""
        collection.find_one.return_value = {"_id": "yoshino703", "_version": 3, "books": []}

        document = await store.get("users", "yoshino703")

        collection.find_one.assert_awaited_once_with({"_id": "yoshino703"})
        assert document.source == {"books": []}
        assert document.version == 3

    @pytest.mark.asyncio
    async def test_get_unversioned_document(self, store, collection):
        """Test that documents without a version start at zero."""
        collection.find_one.return_value = {"_id": "yoshino703", "books": []}

        document = await store.get("users", "yoshino703")

        assert document.version == 0

    @pytest.mark.asyncio
    async def test_get_missing(self, store, collection):
        """Test that a missing document raises DocumentNotFound."""
        collection.find_one.return_value = None

        with pytest.raises(DocumentNotFound):
            await store.get("users", "nobody")

    @pytest.mark.asyncio
    async def test_get_driver_error(self, store, collection):
        """Test that driver failures become StoreError without status."""
        collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(StoreError) as exc_info:
            await store.get("users", "yoshino703")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_put_filters_on_version(self, store, collection):
        """Test that the replace is guarded by the version and bumps it."""
        ack = await store.put("users", "yoshino703", {"books": []}, 3)

        collection.replace_one.assert_awaited_once_with(
            {"_id": "yoshino703", "_version": 3},
            {"books": [], "_version": 4}
        )
        assert ack["_version"] == 4
        assert ack["result"] == "updated"

    @pytest.mark.asyncio
    async def test_put_stale_version(self, store, collection):
        """Test that no match on an existing document is a version conflict."""
        collection.replace_one.return_value = Mock(matched_count=0)

        with pytest.raises(VersionConflict):
            await store.put("users", "yoshino703", {"books": []}, 3)

    @pytest.mark.asyncio
    async def test_put_vanished_document(self, store, collection):
        """Test that no match on a deleted document is not found."""
        collection.replace_one.return_value = Mock(matched_count=0)
        collection.count_documents.return_value = 0

        with pytest.raises(DocumentNotFound):
            await store.put("users", "yoshino703", {"books": []}, 3)

    @pytest.mark.asyncio
    async def test_health_check(self, store, database):
        """Test health check against a reachable server."""
        assert await store.health_check() == {"status": "healthy"}
        database.command.assert_awaited_once_with("ping")
