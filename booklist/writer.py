"""
Conditional write of a decided book list back to the store.
"""

from typing import Any, Dict

from booklist.models import MutationContext
from store.base import DocumentStore


class BookListWriter:
    """Writes the container document guarded by the version it was read at."""

    def __init__(self, store: DocumentStore, users_collection: str):
        self.store = store
        self.users_collection = users_collection

    async def write(self, context: MutationContext) -> Dict[str, Any]:
        """
        Submit ``context.new_books`` using ``context.version``.

        Other fields of the container are written back unchanged. A stale
        version surfaces as VersionConflict and is not retried.
        """
        if context.new_books is None:
            raise ValueError("context has no decided book list to write")

        source = {
            **context.container,
            "books": [entry.model_dump(mode="json") for entry in context.new_books],
        }
        return await self.store.put(self.users_collection, context.user_id, source, context.version)
