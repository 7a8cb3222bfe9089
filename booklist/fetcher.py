"""
Reads the documents an operation needs from the store.
"""

import asyncio
from typing import Any, Optional, Tuple

import structlog
from pydantic import ValidationError

from booklist.models import BookEntry, BookListOperation, InsertEntry, MutationContext
from store.base import DocumentStore, MalformedDocument, StoredDocument

logger = structlog.get_logger(__name__)


def parse_books(raw: Any, user_id: str) -> Tuple[Optional[BookEntry], ...]:
    """
    Parse the ``books`` field of a container document.

    Null items, empty objects and objects without an ``id`` become None
    placeholders; anything else that does not parse means the document is
    malformed.
    """
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise MalformedDocument(f"books of user '{user_id}' is not a list")

    entries = []
    for item in raw:
        if not item or (isinstance(item, dict) and not item.get("id")):
            entries.append(None)
            continue
        try:
            entries.append(BookEntry.model_validate(item))
        except ValidationError as e:
            raise MalformedDocument(f"books of user '{user_id}' hold an invalid entry: {e}") from e

    if None in entries:
        logger.warning("Discarding placeholder entries", user_id=user_id, count=entries.count(None))
    return tuple(entries)


class BookListFetcher:
    """Fetches the container document and, for inserts, the book document."""

    def __init__(self, store: DocumentStore, users_collection: str, books_collection: str):
        self.store = store
        self.users_collection = users_collection
        self.books_collection = books_collection

    async def fetch_container(self, user_id: str) -> StoredDocument:
        return await self.store.get(self.users_collection, user_id)

    async def fetch_title(self, book_id: str) -> str:
        reference = await self.store.get(self.books_collection, book_id)
        return self._title_of(reference)

    @staticmethod
    def _title_of(reference: StoredDocument) -> str:
        title = reference.source.get("title")
        if not isinstance(title, str) or not title:
            raise MalformedDocument(f"book '{reference.key}' has no title")
        return title

    async def fetch(self, user_id: str, book_id: str, operation: BookListOperation) -> MutationContext:
        """
        Read what ``operation`` needs.

        Inserts read the container and the book document concurrently; a
        failure of either read aborts the whole fetch.
        """
        title = None
        if isinstance(operation, InsertEntry):
            container, title = await asyncio.gather(
                self.fetch_container(user_id),
                self.fetch_title(book_id),
            )
        else:
            container = await self.fetch_container(user_id)

        return MutationContext(
            user_id=user_id,
            book_id=book_id,
            operation=operation,
            container=container.source,
            books=parse_books(container.source.get("books"), user_id),
            version=container.version,
            title=title,
        )
