"""
Elasticsearch document store backend.
Talks to the Elasticsearch REST API with an async httpx client and uses
sequence-number/primary-term preconditions for conditional writes.
"""

from typing import Any, Dict, NamedTuple, Optional
from urllib.parse import quote

import httpx
import structlog

from store.base import (
    DocumentNotFound,
    DocumentStore,
    MalformedDocument,
    StoredDocument,
    StoreError,
    VersionConflict,
)

logger = structlog.get_logger(__name__)


class SequenceVersion(NamedTuple):
    """Elasticsearch optimistic concurrency token."""
    seq_no: int
    primary_term: int
    version: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.seq_no}:{self.primary_term}"


class ElasticsearchDocumentStore(DocumentStore):
    """
    Document store backed by Elasticsearch indices.
    Each collection maps to one index; documents are addressed by ``_id``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:9200",
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the Elasticsearch store.

        Args:
            base_url: Cluster URL
            timeout: Per-request timeout in seconds
            headers: Default request headers
            client: Pre-built client, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
        )

    @staticmethod
    def _doc_path(collection: str, key: str) -> str:
        return f"/{collection}/_doc/{quote(key, safe='')}"

    @staticmethod
    def _error_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text or None

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error("Elasticsearch request failed", method=method, path=path, error=str(e))
            raise StoreError(f"Elasticsearch unreachable: {e}") from e

    async def get(self, collection: str, key: str) -> StoredDocument:
        response = await self._request("GET", self._doc_path(collection, key))

        if response.status_code == 404:
            raise DocumentNotFound(
                f"Document '{key}' not found in '{collection}'",
                body=self._error_body(response)
            )
        if response.status_code >= 400:
            raise StoreError(
                f"Elasticsearch GET failed with {response.status_code}",
                status_code=response.status_code,
                body=self._error_body(response)
            )

        try:
            payload = response.json()
            version = SequenceVersion(
                seq_no=payload["_seq_no"],
                primary_term=payload["_primary_term"],
                version=payload.get("_version"),
            )
        except (ValueError, KeyError) as e:
            raise MalformedDocument(
                f"Document '{key}' in '{collection}' has no usable version"
            ) from e

        return StoredDocument(key=key, source=payload.get("_source") or {}, version=version)

    async def put(
        self,
        collection: str,
        key: str,
        source: Dict[str, Any],
        version: SequenceVersion
    ) -> Dict[str, Any]:
        response = await self._request(
            "PUT",
            self._doc_path(collection, key),
            params={"if_seq_no": version.seq_no, "if_primary_term": version.primary_term},
            json=source,
        )

        if response.status_code == 409:
            raise VersionConflict(
                f"Document '{key}' in '{collection}' changed since version {version}",
                body=self._error_body(response)
            )
        if response.status_code >= 400:
            raise StoreError(
                f"Elasticsearch PUT failed with {response.status_code}",
                status_code=response.status_code,
                body=self._error_body(response)
            )

        return response.json()

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform cluster health check.

        Returns:
            Dictionary with health status
        """
        try:
            response = await self.client.get("/_cluster/health")
            response.raise_for_status()
            cluster_status = response.json().get("status", "unknown")
            return {
                "status": "healthy" if cluster_status in ("green", "yellow") else "unhealthy",
                "cluster_status": cluster_status,
            }
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Elasticsearch health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }

    async def close(self) -> None:
        await self.client.aclose()
