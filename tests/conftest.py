"""
Pytest configuration and shared fixtures.
"""

import asyncio
import copy

import pytest
from unittest.mock import AsyncMock

from booklist.service import BookListService
from store.base import DocumentNotFound, DocumentStore, StoredDocument, VersionConflict


class InMemoryDocumentStore(DocumentStore):
    """Versioned in-memory store with the same contract as the real backends."""

    def __init__(self):
        self.documents = {}
        self.put_calls = 0
        self._hold_collection = None
        self._hold_count = 0
        self._waiting = 0
        self._released = None

    def seed(self, collection, key, source, version=1):
        self.documents.setdefault(collection, {})[key] = (copy.deepcopy(source), version)

    def source_of(self, collection, key):
        return self.documents[collection][key][0]

    def hold_reads(self, collection, count):
        """Make reads of ``collection`` wait until ``count`` of them are in flight."""
        self._hold_collection = collection
        self._hold_count = count
        self._waiting = 0
        self._released = asyncio.Event()

    async def get(self, collection, key):
        await asyncio.sleep(0)
        try:
            source, version = self.documents[collection][key]
        except KeyError:
            raise DocumentNotFound(
                f"Document '{key}' not found in '{collection}'",
                body={"_index": collection, "_id": key, "found": False}
            )
        snapshot = StoredDocument(key=key, source=copy.deepcopy(source), version=version)

        if collection == self._hold_collection:
            self._waiting += 1
            if self._waiting >= self._hold_count:
                self._released.set()
            await self._released.wait()

        return snapshot

    async def put(self, collection, key, source, version):
        await asyncio.sleep(0)
        self.put_calls += 1
        _, current = self.documents[collection][key]
        if current != version:
            raise VersionConflict(
                f"Document '{key}' in '{collection}' changed since version {version}",
                body={"error": {"type": "version_conflict_engine_exception"}, "status": 409}
            )
        self.documents[collection][key] = (copy.deepcopy(source), current + 1)
        return {"_index": collection, "_id": key, "_version": current + 1, "result": "updated"}

    async def health_check(self):
        return {"status": "healthy"}


@pytest.fixture
def memory_store():
    """Store seeded with one user and a few book documents."""
    store = InMemoryDocumentStore()
    store.seed("users", "yoshino703", {"name": "Yoshino", "books": []})
    store.seed("users", "reader42", {
        "name": "Reader",
        "books": [
            {"id": "pg1342", "title": "Pride and Prejudice", "status": "Reading"},
            {"id": "pg84", "title": "Frankenstein", "status": "BackLog"},
            {"id": "pg11", "title": "Alice's Adventures in Wonderland", "status": "Finished"},
        ],
    })
    store.seed("books", "pg1342", {"title": "Pride and Prejudice", "authors": ["Austen, Jane"]})
    store.seed("books", "pg84", {"title": "Frankenstein", "authors": ["Shelley, Mary"]})
    store.seed("books", "pg11", {"title": "Alice's Adventures in Wonderland", "authors": ["Carroll, Lewis"]})
    store.seed("books", "pg703", {"title": "Lays of Ancient Rome", "authors": ["Macaulay, Thomas"]})
    return store


@pytest.fixture
def service(memory_store):
    """Book list service over the in-memory store."""
    return BookListService(memory_store)


@pytest.fixture
def mock_store():
    """Store mock that records every call."""
    return AsyncMock(spec=DocumentStore)
