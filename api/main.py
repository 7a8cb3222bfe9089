"""
FastAPI main application for the Book List API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import structlog
from fastapi import FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import config as api_config
from api.models import BookListResponse, ErrorResponse, HealthResponse
from booklist.models import Outcome
from booklist.service import BookListService
from store import DocumentStore, create_store
from utilities.config import config
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)

# Global store and service
document_store: DocumentStore = None
booklist_service: BookListService = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global document_store, booklist_service

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )
    logger.info("Starting Book List API", store_backend=config.store_backend)

    document_store = create_store(config)
    booklist_service = BookListService(
        document_store,
        users_collection=config.users_index,
        books_collection=config.books_index
    )

    yield

    logger.info("Shutting down Book List API")
    await document_store.close()


app = FastAPI(
    title=api_config.api_title,
    description="""
    Maintain per-user reading lists embedded in user documents.

    ## Concurrency

    Every change reads the user's document, decides the new list and writes it
    back only if nobody else updated the document in between. A request that
    loses such a race receives **409 Conflict** and may simply be retried.

    ## Statuses

    `Reading`, `Finished`, `BackLog`, `OnHold`, `Dropped` (case-insensitive).
    """,
    version=api_config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            status_code=exc.status_code
        ).model_dump(),
        headers=exc.headers
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc) if api_config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


def get_service() -> BookListService:
    if not booklist_service:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Book list service not available"
        )
    return booklist_service


def to_response(outcome: Outcome) -> JSONResponse:
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    store_status = "unavailable"
    if document_store:
        health_info = await document_store.health_check()
        store_status = health_info.get("status", "unknown")

    return HealthResponse(
        status="healthy" if store_status == "healthy" else "degraded",
        timestamp=datetime.utcnow(),
        version=api_config.api_version,
        store_status=store_status,
        store_backend=config.store_backend
    )


# Book list endpoints
@app.get("/api/user/{user_id}/books", response_model=BookListResponse, tags=["Book lists"])
async def get_books(user_id: str):
    """
    Get the user's book list and the version it was read at.

    - **user_id**: Owner of the list
    """
    return to_response(await get_service().get_books(user_id))


@app.put("/api/user/{user_id}/books/{book_id}", tags=["Book lists"])
async def add_book(
    user_id: str,
    book_id: str,
    read_status: Optional[str] = Query(None, alias="status", description="Initial status, Reading if omitted")
):
    """
    Add a book to the user's list.

    - **user_id**: Owner of the list
    - **book_id**: Book document identifier, e.g. pg1342
    - **status**: Reading, Finished, BackLog, OnHold or Dropped

    Returns 409 when the book is already listed.
    """
    return to_response(await get_service().insert_entry(user_id, book_id, read_status))


@app.patch("/api/user/{user_id}/books/{book_id}", tags=["Book lists"])
async def change_book_status(
    user_id: str,
    book_id: str,
    read_status: Optional[str] = Query(None, alias="status", description="New status")
):
    """
    Change the reading status of a listed book.

    Returns 404 when the book is not listed and 409 when the status is
    already the requested one.
    """
    return to_response(await get_service().change_status(user_id, book_id, read_status))


@app.delete("/api/user/{user_id}/books/{book_id}", tags=["Book lists"])
async def remove_book(user_id: str, book_id: str):
    """
    Remove a book from the user's list.

    Returns 404 when the book is not listed.
    """
    return to_response(await get_service().delete_entry(user_id, book_id))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level=api_config.log_level.lower()
    )
