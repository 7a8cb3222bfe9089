"""
Versioned document store backends.

Provides the store contract used by the book list pipeline and the
Elasticsearch and MongoDB implementations of it.
"""

from store.base import (
    DocumentNotFound,
    DocumentStore,
    MalformedDocument,
    StoredDocument,
    StoreError,
    VersionConflict,
)

__all__ = [
    "DocumentNotFound",
    "DocumentStore",
    "MalformedDocument",
    "StoredDocument",
    "StoreError",
    "VersionConflict",
    "create_store",
]


def create_store(store_config) -> DocumentStore:
    """Build the backend selected by ``store_config.store_backend``."""
    if store_config.store_backend == "mongodb":
        from store.mongodb import MongoDocumentStore
        return MongoDocumentStore(
            connection_url=store_config.mongodb_url,
            database_name=store_config.mongodb_database,
        )

    from store.elasticsearch import ElasticsearchDocumentStore
    return ElasticsearchDocumentStore(
        base_url=store_config.elasticsearch_url,
        timeout=store_config.request_timeout,
        headers=store_config.get_headers(),
    )
