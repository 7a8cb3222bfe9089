"""
Document store contract shared by every backend.

A store hands back a document together with an opaque version token and
accepts a write only when the presented token still matches its current
state. Backends translate their own failures into the errors below.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class StoreError(Exception):
    """Failure reported by (or while talking to) the document store."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class DocumentNotFound(StoreError):
    """The requested document does not exist."""

    def __init__(self, message: str, body: Optional[Any] = None):
        super().__init__(message, status_code=404, body=body)


class VersionConflict(StoreError):
    """The presented version token no longer matches the stored document."""

    def __init__(self, message: str, body: Optional[Any] = None):
        super().__init__(message, status_code=409, body=body)


class MalformedDocument(StoreError):
    """The store returned a document this service cannot interpret."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class StoredDocument(BaseModel):
    """A document read from the store along with its version token."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    source: Dict[str, Any]
    version: Any


class DocumentStore:
    """Interface every store backend implements."""

    async def get(self, collection: str, key: str) -> StoredDocument:
        """
        Fetch a document and its current version token.

        Raises:
            DocumentNotFound: the document does not exist
            StoreError: any other store or transport failure
        """
        raise NotImplementedError

    async def put(
        self,
        collection: str,
        key: str,
        source: Dict[str, Any],
        version: Any
    ) -> Dict[str, Any]:
        """
        Replace a document only if its version still equals ``version``.

        Returns:
            The store's acknowledgement body

        Raises:
            VersionConflict: the document changed since ``version`` was read
            StoreError: any other store or transport failure
        """
        raise NotImplementedError

    async def health_check(self) -> Dict[str, Any]:
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections held by the backend."""
