"""Utility to execute OpenSearch query payloads through the MCP query tool."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from ..formatting import RESPONSE_FORMATS


def _load_payload(payload_path: Path | None) -> Dict[str, Any]:
    """Load a Query DSL body from a file or stdin."""

    raw_payload: str | None = None

    if payload_path is not None:
        raw_payload = payload_path.read_text(encoding="utf-8")
    elif not sys.stdin.isatty():
        raw_payload = sys.stdin.read()

    if raw_payload is None or not raw_payload.strip():
        return {}

    try:
        payload = json.loads(raw_payload)
    except json.JSONDecodeError as exc:  # pragma: no cover - CLI parsing
        raise SystemExit(f"Failed to parse JSON payload: {exc}") from exc

    if not isinstance(payload, dict):
        raise SystemExit("Payload must be a JSON object.")

    return payload


def _dump_result(result: Dict[str, Any], pretty: bool) -> None:
    """Print the tool result to stdout."""

    if pretty:
        json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    else:
        json.dump(result, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Execute an OpenSearch Query DSL body using the execute_opensearch_query tool. "
            "An empty payload runs a match-all query."
        )
    )
    parser.add_argument(
        "--payload",
        type=Path,
        help="Path to a JSON file containing the query body. If omitted, stdin is used.",
    )
    parser.add_argument(
        "--index",
        help="Index to query. Defaults to INDEX_NAME or analytics-events.",
    )
    parser.add_argument(
        "--format",
        default="analytics",
        help=f"Response format, one of: {', '.join(RESPONSE_FORMATS)} (default: analytics).",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print the JSON response.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the query runner CLI."""

    args = build_parser().parse_args(argv)
    payload = _load_payload(args.payload)

    try:
        from opensearch_mcp_server import execute_opensearch_query  # noqa: WPS433 - runtime import for env setup
    except Exception as exc:  # pragma: no cover - defensive import handling
        raise SystemExit(f"Failed to initialize query tool: {exc}") from exc

    result = execute_opensearch_query(query=payload, index=args.index, format=args.format)
    _dump_result(result, args.pretty)

    if isinstance(result, dict) and "error" in result:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
