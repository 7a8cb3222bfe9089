"""
Book list pipeline: fetch, decide, write, report.

Each call runs one request from start to finish on its own snapshot of the
container document. Concurrent requests against the same container are
arbitrated solely by the store's version check on write.
"""

from typing import Optional

import structlog

from booklist.exceptions import MutationRejected
from booklist.fetcher import BookListFetcher, parse_books
from booklist.models import MutationContext, OperationKind, Outcome
from booklist.mutator import build_operation, discard_placeholders, mutate
from booklist.reporter import report_rejection, report_store_error, report_success
from booklist.writer import BookListWriter
from store.base import DocumentStore, StoreError, VersionConflict
from utilities.logger import MutationLogger

logger = structlog.get_logger(__name__)


class BookListService:
    """Applies book list operations against a versioned document store."""

    def __init__(
        self,
        store: DocumentStore,
        users_collection: str = "users",
        books_collection: str = "books"
    ):
        """
        Initialize the service.

        Args:
            store: Document store backend
            users_collection: Collection holding the per-user container documents
            books_collection: Collection holding the book documents
        """
        self.store = store
        self.fetcher = BookListFetcher(store, users_collection, books_collection)
        self.writer = BookListWriter(store, users_collection)

    async def insert_entry(self, user_id: str, book_id: str, status: Optional[str] = None) -> Outcome:
        """Add a book to the user's list, defaulting to Reading."""
        return await self.apply(user_id, book_id, OperationKind.INSERT, status)

    async def change_status(self, user_id: str, book_id: str, status: Optional[str]) -> Outcome:
        """Change the reading status of a listed book."""
        return await self.apply(user_id, book_id, OperationKind.STATUS_CHANGE, status)

    async def delete_entry(self, user_id: str, book_id: str) -> Outcome:
        """Remove a book from the user's list."""
        return await self.apply(user_id, book_id, OperationKind.DELETE)

    async def apply(
        self,
        user_id: str,
        book_id: str,
        kind: OperationKind,
        status_text: Optional[str] = None
    ) -> Outcome:
        """
        Run one operation through the pipeline.

        Returns:
            Exactly one Outcome: the store acknowledgement on success, or the
            classification of whichever stage failed
        """
        mutation_logger = MutationLogger().bind_context(
            user_id=user_id, book_id=book_id, operation=kind.value
        )
        context: Optional[MutationContext] = None

        try:
            operation = build_operation(kind, status_text)

            context = await self.fetcher.fetch(user_id, book_id, operation)
            mutation_logger.log_fetched(context.version, len(context.books), context.title)

            context = context.model_copy(update={
                "new_books": mutate(context.books, book_id, operation, context.title)
            })

            ack = await self.writer.write(context)

        except MutationRejected as rejection:
            mutation_logger.log_rejected(rejection.status_code, rejection.reason)
            return report_rejection(rejection)
        except VersionConflict as conflict:
            mutation_logger.log_conflict(context.version if context else None)
            return report_store_error(conflict)
        except StoreError as error:
            mutation_logger.log_store_error(error.message, error.status_code)
            return report_store_error(error)

        mutation_logger.log_written(len(context.new_books))
        return report_success(ack)

    async def get_books(self, user_id: str) -> Outcome:
        """Read a user's list together with the version it was read at."""
        try:
            container = await self.fetcher.fetch_container(user_id)
            books = discard_placeholders(parse_books(container.source.get("books"), user_id))
        except StoreError as error:
            logger.error("Failed to read book list", user_id=user_id, error=error.message)
            return report_store_error(error)

        return Outcome(
            status_code=200,
            body={
                "user_id": user_id,
                "books": [entry.model_dump(mode="json") for entry in books],
                "version": str(container.version),
            },
        )
