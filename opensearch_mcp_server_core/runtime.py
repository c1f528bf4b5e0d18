"""Runtime bootstrap for the OpenSearch MCP server."""

from __future__ import annotations

import os
import sys
from typing import Optional, Tuple

from dotenv import load_dotenv  # type: ignore[import]
from mcp.server.fastmcp import FastMCP  # type: ignore[import]

from .client import OpenSearchClient
from .config import DEFAULT_INDEX_NAME, DEFAULT_URL, DEFAULT_USER_NAME
from .utils import _coalesce, _try_parse_int


def initialize_runtime() -> Tuple[FastMCP, Optional[OpenSearchClient]]:
    """Load environment variables, create the MCP instance, and initialize the client."""

    print("Starting OpenSearch MCP Server...", file=sys.stderr)
    load_dotenv()
    print("Environment variables loaded", file=sys.stderr)

    mcp = FastMCP(
        "opensearch",
        instructions=(
            "Query an OpenSearch analytics-events index with Query DSL and receive analytics, dto, "
            "or raw formatted results."
        ),
    )
    print("MCP server instance created", file=sys.stderr)

    try:
        search_client = OpenSearchClient.from_env()
        print("Search client initialized successfully", file=sys.stderr)
    except Exception as exc:  # pragma: no cover - diagnostic path
        print(f"Error initializing search client: {exc}", file=sys.stderr)
        search_client = None

    return mcp, search_client


def run_server(mcp: FastMCP) -> None:
    """Run the MCP server using either stdio or SSE transport."""

    transport = (os.getenv("MCP_TRANSPORT") or "stdio").strip().lower()
    print(
        "Environment: "
        f"OPENSEARCH_URL={os.getenv('OPENSEARCH_URL') or DEFAULT_URL}, "
        f"OPENSEARCH_USER_NAME={os.getenv('OPENSEARCH_USER_NAME') or DEFAULT_USER_NAME}, "
        f"INDEX_NAME={os.getenv('INDEX_NAME') or DEFAULT_INDEX_NAME}",
        file=sys.stderr,
    )

    if transport == "sse":
        host = os.getenv("MCP_HOST", "0.0.0.0")
        port = _coalesce(_try_parse_int(os.getenv("MCP_PORT")), 8080)
        mcp.settings.host = host
        mcp.settings.port = port
        print(f"MCP OpenSearch Server running over SSE on {host}:{port}", file=sys.stderr)
        mcp.run(transport="sse")
    elif transport == "stdio":
        print("MCP OpenSearch Server running on stdio", file=sys.stderr)
        mcp.run()
    else:
        raise ValueError(f"Unsupported MCP_TRANSPORT '{transport}'. Use 'stdio' or 'sse'.")


__all__ = ["initialize_runtime", "run_server"]
