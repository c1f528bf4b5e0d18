"""OpenSearch query MCP tool."""

from __future__ import annotations

import sys
from typing import Annotated, Any, Callable, Dict, Optional, Union

from pydantic import Field  # type: ignore[import]

from ..config import CONNECTION_HINT
from ..errors import (
    InvalidFormatError,
    MalformedResponseError,
    SearchConnectionError,
    SearchQueryError,
)
from ..formatting import RESPONSE_FORMATS, format_response, validate_format
from ..utils import _parse_query_payload


TOOL_NAME = "execute_opensearch_query"

TOOL_DESCRIPTION = """Execute OpenSearch queries for analytics events and return formatted results.

Query the OpenSearch analytics-events index and transform results into analytics event format.

Use this tool to:
- Search for analytics events by module type (FACIAL_RECOGNITION, CROWD_COUNT, VH_LP_RECOGNITION, etc.)
- Query events within a specific time range
- Filter events by camera/source, task, or service
- Get aggregated analytics data (terms aggregations with a nested top_hits per bucket)
- Search for specific event IDs or metadata

The tool accepts full OpenSearch Query DSL and returns results in one of three formats:
- "analytics": {count, events, groupedEvents} - UI-friendly eventData objects
- "dto": {totalValue, groupedResults, hitList} - aggregation buckets and hit metadata
- "raw": the OpenSearch response as returned by the engine

Available analytics modules: FACIAL_RECOGNITION, CROWD_COUNT, CROWD_FLOW, LOITERING,
PERSON_RE_ID, UNATTENDED, VH_LP_RECOGNITION, VH_MODEL_RECOGNITION, VH_CT_RECOGNITION."""


def _client_missing_error(tool: str) -> Dict[str, Any]:
    return {
        "error": "OpenSearch client is not initialized. Check server logs for details.",
        "hint": CONNECTION_HINT,
        "tool": tool,
    }


def _connection_failed(exc: SearchConnectionError) -> Dict[str, Any]:
    return {
        "error": "OpenSearch connection failed",
        "message": str(exc),
        "hint": exc.hint or CONNECTION_HINT,
    }


def register_query_tool(mcp, get_search_client) -> Callable:
    """Register the query tool on the provided MCP instance."""

    @mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
    def execute_opensearch_query(
        query: Annotated[
            Optional[Union[Dict[str, Any], str]],
            Field(
                default=None,
                description="OpenSearch Query DSL object (full query body, including aggs, sort and size).",
                examples=[
                    {
                        "query": {"term": {"eventData.moduleId.keyword": "CROWD_COUNT"}},
                        "sort": [{"eventData.eventDateTime": {"order": "desc"}}],
                        "size": 5,
                    },
                    {
                        "size": 0,
                        "aggs": {
                            "by_source": {
                                "terms": {"field": "eventData.eventSourceId.keyword", "size": 10},
                                "aggs": {
                                    "latest_events": {
                                        "top_hits": {
                                            "size": 1,
                                            "sort": [{"eventData.eventDateTime": {"order": "desc"}}],
                                        }
                                    }
                                },
                            }
                        },
                    },
                ],
            ),
        ] = None,
        index: Annotated[
            Optional[str],
            Field(
                default=None,
                description="Index name to query. Defaults to `INDEX_NAME` or `analytics-events`.",
            ),
        ] = None,
        format: Annotated[
            str,
            Field(
                default="analytics",
                description=(
                    "Response format: `analytics` (UI-friendly), `dto` (with metadata), or `raw` "
                    "(OpenSearch response)."
                ),
                examples=list(RESPONSE_FORMATS),
            ),
        ] = "analytics",
    ) -> Dict[str, Any]:
        """Run an OpenSearch query and return the response in the requested format."""

        print(f"Tool called: {TOOL_NAME}(index={index}, format={format})", file=sys.stderr)

        try:
            response_format = validate_format(format)
        except InvalidFormatError as exc:
            return {
                "error": "Invalid format",
                "message": f"Format must be one of: {', '.join(exc.allowed)}",
                "received": exc.received,
            }

        search_client = get_search_client()
        if search_client is None:
            return _client_missing_error(TOOL_NAME)

        try:
            body = _parse_query_payload(query)
        except ValueError as exc:
            return {"error": "Invalid query", "message": str(exc)}

        try:
            response = search_client.execute_query(body, index)
        except SearchConnectionError as exc:
            return _connection_failed(exc)
        except SearchQueryError as exc:
            return {
                "error": "OpenSearch query failed",
                "message": str(exc),
                "details": exc.details,
                "status": exc.status,
            }

        try:
            return format_response(response, response_format)
        except MalformedResponseError as exc:
            print(f"Malformed OpenSearch response: {exc}", file=sys.stderr)
            return {
                "error": "Malformed OpenSearch response",
                "message": str(exc),
                "field": exc.field,
            }

    return execute_opensearch_query


def register_cluster_info_tool(mcp, get_search_client) -> Callable:
    """Register the connection check tool on the provided MCP instance."""

    @mcp.tool()
    def opensearch_cluster_info() -> Dict[str, Any]:
        """Check the OpenSearch connection and report cluster name, version and default index."""

        print("Tool called: opensearch_cluster_info()", file=sys.stderr)
        search_client = get_search_client()
        if search_client is None:
            return _client_missing_error("opensearch_cluster_info")

        try:
            return search_client.info()
        except SearchConnectionError as exc:
            return _connection_failed(exc)
        except SearchQueryError as exc:
            return {
                "error": "OpenSearch request failed",
                "message": str(exc),
                "details": exc.details,
                "status": exc.status,
            }

    return opensearch_cluster_info


__all__ = ["TOOL_NAME", "register_cluster_info_tool", "register_query_tool"]
