"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from booklist.models import BookEntry, ErrorResponse

__all__ = ["BookListResponse", "ErrorResponse", "HealthResponse"]


class BookListResponse(BaseModel):
    """A user's book list as currently stored."""
    user_id: str = Field(..., description="Owner of the list")
    books: List[BookEntry] = Field(..., description="Books in list order")
    version: str = Field(..., description="Version token the list was read at")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    store_status: str = Field(..., description="Document store status")
    store_backend: Optional[str] = Field(None, description="Configured store backend")
