"""Core implementation for the OpenSearch MCP server.

This package houses the supporting modules that the public
`opensearch_mcp_server` wrapper re-exports. The response formatter in
`formatting` is pure and has no dependency on the client or the MCP runtime.
"""

from . import runtime
from .client import OpenSearchClient
from .config import OpenSearchSettings
from .errors import (
    InvalidFormatError,
    MalformedResponseError,
    SearchConnectionError,
    SearchQueryError,
)
from .formatting import (
    RESPONSE_FORMATS,
    format_as_analytics,
    format_as_dto,
    format_response,
    select_grouping_buckets,
    validate_format,
)
from .runtime import initialize_runtime, run_server
from .tools.query import register_cluster_info_tool, register_query_tool

__all__ = [
    "OpenSearchClient",
    "OpenSearchSettings",
    "InvalidFormatError",
    "MalformedResponseError",
    "SearchConnectionError",
    "SearchQueryError",
    "RESPONSE_FORMATS",
    "format_as_analytics",
    "format_as_dto",
    "format_response",
    "select_grouping_buckets",
    "validate_format",
    "initialize_runtime",
    "run_server",
    "register_cluster_info_tool",
    "register_query_tool",
    "runtime",
]
