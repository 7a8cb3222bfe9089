"""
Rejections raised when a book list operation cannot be applied.
"""

from typing import Optional


class MutationRejected(Exception):
    """Base class for operations refused before anything is written."""

    status_code = 400

    def __init__(self, reason: str, detail: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.detail = detail


class BadRequestRejection(MutationRejected):
    status_code = 400


class ConflictRejection(MutationRejected):
    status_code = 409


class NotFoundRejection(MutationRejected):
    status_code = 404
