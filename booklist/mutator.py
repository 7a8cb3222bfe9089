"""
Book list decision logic.

Everything here is pure: given the books read from the store and the
requested operation, compute the new list or raise a rejection. Nothing in
this module talks to the store.
"""

from typing import Optional, Sequence, Tuple

from booklist.exceptions import BadRequestRejection, ConflictRejection, NotFoundRejection
from booklist.models import (
    BookEntry,
    BookListOperation,
    ChangeStatus,
    DeleteEntry,
    InsertEntry,
    OperationKind,
    ReadStatus,
)


def parse_status(text: Optional[str]) -> ReadStatus:
    """Parse requested status text, rejecting anything unknown."""
    status = ReadStatus.parse(text)
    if status is None:
        raise BadRequestRejection(
            "invalid status",
            detail=f"status must be one of: {', '.join(s.value for s in ReadStatus)}"
        )
    return status


def build_operation(kind: OperationKind, status_text: Optional[str] = None) -> BookListOperation:
    """
    Turn a request into an operation.

    Insert falls back to Reading when no status is given; a status change
    requires one. Delete ignores it.
    """
    if kind == OperationKind.INSERT:
        if status_text is None:
            return InsertEntry()
        return InsertEntry(status=parse_status(status_text))
    if kind == OperationKind.STATUS_CHANGE:
        return ChangeStatus(status=parse_status(status_text))
    return DeleteEntry()


def discard_placeholders(books: Sequence[Optional[BookEntry]]) -> Tuple[BookEntry, ...]:
    """Drop null/empty items left behind in a damaged list."""
    return tuple(entry for entry in books if entry)


def find_entry(books: Sequence[BookEntry], entry_id: str) -> int:
    """Index of the first entry with ``entry_id``, or -1."""
    for index, entry in enumerate(books):
        if entry.id == entry_id:
            return index
    return -1


def mutate(
    books: Sequence[Optional[BookEntry]],
    entry_id: str,
    operation: BookListOperation,
    title: Optional[str] = None
) -> Tuple[BookEntry, ...]:
    """
    Apply ``operation`` to ``books`` for the entry ``entry_id``.

    Args:
        books: Current list as read from the container document
        entry_id: Identifier of the targeted book
        operation: Insert, status change or delete
        title: Title of the book document, required for inserts

    Returns:
        The new list, order preserved

    Raises:
        ConflictRejection: insert of a listed book, or an unchanged status
        NotFoundRejection: status change or delete of an unlisted book
    """
    books = discard_placeholders(books)
    index = find_entry(books, entry_id)

    if isinstance(operation, InsertEntry):
        if index != -1:
            raise ConflictRejection("already in list", detail=f"book '{entry_id}' is already listed")
        if title is None:
            raise ValueError("inserting an entry requires the book title")
        return books + (BookEntry(id=entry_id, title=title, status=operation.status),)

    if index == -1:
        raise NotFoundRejection("not in list", detail=f"book '{entry_id}' is not listed")

    if isinstance(operation, ChangeStatus):
        current = books[index]
        if current.status == operation.status:
            raise ConflictRejection(
                "status unchanged",
                detail=f"book '{entry_id}' is already {operation.status.value}"
            )
        updated = current.model_copy(update={"status": operation.status})
        return books[:index] + (updated,) + books[index + 1:]

    if isinstance(operation, DeleteEntry):
        return books[:index] + books[index + 1:]

    raise TypeError(f"Unsupported operation: {operation!r}")
