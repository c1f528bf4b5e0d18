"""Utility helpers shared across the OpenSearch MCP server modules."""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional, Union


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _coalesce(*values: Optional[Any]) -> Optional[Any]:
    """Return the first non-None value from the provided sequence."""

    for value in values:
        if value is not None:
            return value
    return None


def _try_parse_int(value: Optional[Union[str, int]]) -> Optional[int]:
    """Safely parse integers from environment values."""

    if value is None:
        return None

    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        print(f"Warning: unable to parse integer from value '{value}'", file=sys.stderr)
        return None


def _try_parse_bool(value: Optional[Union[str, bool]]) -> Optional[bool]:
    """Parse ``true``/``false`` style environment values."""

    if value is None or isinstance(value, bool):
        return value

    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False

    print(f"Warning: unable to parse boolean from value '{value}'", file=sys.stderr)
    return None


def _parse_query_payload(value: Optional[Union[str, Dict[str, Any]]]) -> Dict[str, Any]:
    """Accept a query body as a mapping or a JSON object string."""

    if value is None:
        return {}

    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return {}
        try:
            value = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Query is not valid JSON: {exc}") from exc

    if not isinstance(value, dict):
        raise ValueError("Query must be a JSON object (OpenSearch Query DSL body).")

    return value


__all__ = [name for name in globals() if name.startswith("_") and not name.startswith("__")]
