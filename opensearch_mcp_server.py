"""OpenSearch MCP Server public entrypoint.

The implementation lives under ``opensearch_mcp_server_core``. This module
builds the runtime, registers the tools and re-exports the public API used by
the tests and the query runner.
"""

from __future__ import annotations

from opensearch_mcp_server_core import (
    OpenSearchClient,
    format_response,
    initialize_runtime,
    register_cluster_info_tool,
    register_query_tool,
    run_server,
)


mcp, search_client = initialize_runtime()


def _get_search_client():
    return globals().get("search_client")


execute_opensearch_query = register_query_tool(mcp, _get_search_client)
opensearch_cluster_info = register_cluster_info_tool(mcp, _get_search_client)


def main() -> None:
    """Entry point used when running the module as a script."""

    run_server(mcp)


__all__ = [
    "OpenSearchClient",
    "mcp",
    "search_client",
    "execute_opensearch_query",
    "opensearch_cluster_info",
    "format_response",
    "main",
]


if __name__ == "__main__":  # pragma: no cover - entrypoint behaviour
    main()
