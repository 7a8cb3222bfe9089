"""
Pydantic models for book list entries, operations and pipeline state.
"""

import re
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SEPARATORS = re.compile(r"[\s_-]+")


class ReadStatus(str, Enum):
    """Reading status of one book in a user's list."""
    READING = "Reading"
    FINISHED = "Finished"
    BACKLOG = "BackLog"
    ONHOLD = "OnHold"
    DROPPED = "Dropped"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["ReadStatus"]:
        """
        Match status text case-insensitively against the known statuses.

        Separators are ignored, so ``on-hold`` and ``ON_HOLD`` both resolve
        to ``OnHold``.

        Returns:
            The matching status, or None when the text is unknown
        """
        if text is None:
            return None
        normalized = _SEPARATORS.sub("", text).casefold()
        for status in cls:
            if status.value.casefold() == normalized:
                return status
        return None


class OperationKind(str, Enum):
    """Kinds of book list mutation."""
    INSERT = "insert"
    STATUS_CHANGE = "status_change"
    DELETE = "delete"


class BookEntry(BaseModel):
    """One book's membership record inside a user's list."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Book identifier")
    title: str = Field(..., description="Book title copied from the book document")
    status: ReadStatus = Field(..., description="Reading status")

    @field_validator("status", mode="before")
    @classmethod
    def canonicalize_status(cls, v):
        """Accept stored status text in any casing."""
        if isinstance(v, ReadStatus):
            return v
        status = ReadStatus.parse(v) if isinstance(v, str) else None
        if status is None:
            raise ValueError(f"invalid status: {v!r}")
        return status


class InsertEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[OperationKind.INSERT] = OperationKind.INSERT
    status: ReadStatus = ReadStatus.READING


class ChangeStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[OperationKind.STATUS_CHANGE] = OperationKind.STATUS_CHANGE
    status: ReadStatus


class DeleteEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[OperationKind.DELETE] = OperationKind.DELETE


BookListOperation = Annotated[
    Union[InsertEntry, ChangeStatus, DeleteEntry],
    Field(discriminator="kind"),
]


class MutationContext(BaseModel):
    """
    Everything one request has learned so far.

    Built by the fetcher and advanced with ``model_copy`` once the mutator
    has decided; never modified in place.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user_id: str
    book_id: str
    operation: BookListOperation
    container: Dict[str, Any] = Field(default_factory=dict)
    books: Tuple[Optional[BookEntry], ...] = ()
    version: Any = None
    title: Optional[str] = None
    new_books: Optional[Tuple[BookEntry, ...]] = None


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class Outcome(BaseModel):
    """The single response produced for one request."""
    status_code: int
    body: Any = None
