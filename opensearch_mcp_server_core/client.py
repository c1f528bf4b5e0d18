"""OpenSearch client wrapper used by the MCP tools."""

from __future__ import annotations

import sys
from typing import Any, Dict, Optional

from opensearchpy import OpenSearch  # type: ignore[import]
from opensearchpy.exceptions import (  # type: ignore[import]
    ConnectionError as OpenSearchConnectionError,
    TransportError,
)

from .config import CONNECTION_HINT, OpenSearchSettings
from .errors import SearchConnectionError, SearchQueryError


class OpenSearchClient:
    """Client for an OpenSearch cluster.

    Instances are created explicitly by the caller and passed to whatever needs
    to issue queries. Nothing is cached at module level.
    """

    def __init__(self, settings: OpenSearchSettings):
        self.settings = settings
        self.index_name = settings.index_name

        print(f"Connecting to OpenSearch at {settings.url}", file=sys.stderr)
        if not settings.verify_certs:
            print("TLS certificate verification is disabled", file=sys.stderr)

        self.search_client = OpenSearch(
            hosts=[settings.url],
            http_auth=(settings.username, settings.password),
            verify_certs=settings.verify_certs,
            ssl_show_warn=settings.verify_certs,
            timeout=settings.timeout,
        )
        print(f"OpenSearch client initialized for index: {self.index_name}", file=sys.stderr)

    @classmethod
    def from_env(cls) -> "OpenSearchClient":
        """Create a client from environment variables."""

        return cls(OpenSearchSettings.from_env())

    def execute_query(
        self,
        query: Optional[Dict[str, Any]] = None,
        index: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Run a Query DSL body against ``index`` and return the raw response."""

        target_index = index or self.index_name
        body = query if query is not None else {}
        print(f"Executing OpenSearch query on index: {target_index}", file=sys.stderr)

        try:
            response = self.search_client.search(index=target_index, body=body)
        except OpenSearchConnectionError as exc:
            raise self._connection_error(exc) from exc
        except TransportError as exc:
            raise self._query_error(exc) from exc

        took = response.get("took") if isinstance(response, dict) else None
        print(f"OpenSearch query completed (took={took}ms)", file=sys.stderr)
        return response

    def info(self) -> Dict[str, Any]:
        """Return cluster name and version, raising ``SearchConnectionError`` when unreachable."""

        try:
            payload = self.search_client.info()
        except OpenSearchConnectionError as exc:
            raise self._connection_error(exc) from exc
        except TransportError as exc:
            raise self._query_error(exc) from exc

        return {
            "cluster_name": payload.get("cluster_name"),
            "version": (payload.get("version") or {}).get("number"),
            "url": self.settings.url,
            "index": self.index_name,
        }

    @staticmethod
    def _connection_error(exc: Exception) -> SearchConnectionError:
        print(f"OpenSearch connection failed: {exc}", file=sys.stderr)
        return SearchConnectionError(str(exc), hint=CONNECTION_HINT)

    @staticmethod
    def _query_error(exc: TransportError) -> SearchQueryError:
        details = exc.info if len(exc.args) > 2 else None
        if isinstance(details, dict):
            details = details.get("error", details)
        else:
            details = exc.error

        status = exc.status_code if isinstance(exc.status_code, int) else None
        print(f"OpenSearch query failed (status={status}): {exc}", file=sys.stderr)
        return SearchQueryError(str(exc), status=status, details=details)


__all__ = ["OpenSearchClient"]
