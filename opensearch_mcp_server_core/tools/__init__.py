"""Tool registration helpers for the OpenSearch MCP server."""

from .query import register_cluster_info_tool, register_query_tool

__all__ = [
    "register_cluster_info_tool",
    "register_query_tool",
]
