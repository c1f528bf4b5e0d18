"""Shape OpenSearch ``_search`` responses into the payloads returned to MCP clients.

Three formats are available:

``raw``
    The engine response, untouched.
``dto``
    ``{"totalValue", "groupedResults", "hitList"}``: the total hit count, the
    buckets of the grouping aggregation and the hits with their metadata.
``analytics``
    ``{"count", "events", "groupedEvents"}``: the ``eventData`` payload of every
    hit, plus the ``eventData`` of the top hits nested inside each bucket.

Every function here is pure. Inputs are never mutated and the same input always
yields an equal output.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, List, Optional

from .errors import InvalidFormatError, MalformedResponseError


RESPONSE_FORMATS = ("analytics", "dto", "raw")


def validate_format(value: Any) -> str:
    """Return ``value`` if it names a known response format, raise otherwise."""

    if isinstance(value, str) and value in RESPONSE_FORMATS:
        return value
    raise InvalidFormatError(value, RESPONSE_FORMATS)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def has_buckets(value: Any) -> bool:
    """True when ``value`` is an aggregation result with at least one bucket."""

    if not isinstance(value, Mapping):
        return False
    buckets = value.get("buckets")
    return _is_sequence(buckets) and len(buckets) > 0


def _first_match(mapping: Mapping, predicate: Callable[[Any], bool]) -> Optional[Any]:
    # Mappings iterate in insertion order, which for parsed JSON is document order.
    for value in mapping.values():
        if predicate(value):
            return value
    return None


def select_grouping_buckets(aggregations: Optional[Mapping]) -> List[Any]:
    """Return the buckets of the first aggregation that has any.

    The aggregation name does not matter; metric aggregations and aggregations
    with empty ``buckets`` are skipped. When several aggregations qualify only
    the first one is used.
    """

    if not isinstance(aggregations, Mapping):
        return []

    selected = _first_match(aggregations, has_buckets)
    if selected is None:
        return []
    return list(selected["buckets"])


def _hit_set(response: Mapping) -> Mapping:
    if not isinstance(response, Mapping):
        raise MalformedResponseError("response", "expected a search response object")

    hit_set = response.get("hits")
    if not isinstance(hit_set, Mapping):
        raise MalformedResponseError("hits", "missing or not an object")
    return hit_set


def _hits(response: Mapping) -> Sequence:
    hits = _hit_set(response).get("hits")
    if not _is_sequence(hits):
        raise MalformedResponseError("hits.hits", "missing or not a list")
    return hits


def total_value(response: Mapping) -> int:
    """Return ``hits.total.value`` (or a bare integer ``hits.total``)."""

    total = _hit_set(response).get("total")
    if isinstance(total, Mapping):
        total = total.get("value")
    if isinstance(total, bool) or not isinstance(total, int):
        raise MalformedResponseError("hits.total", "missing or without an integer value")
    return total


def extract_event(hit: Any) -> Optional[Any]:
    """Return ``_source.eventData`` of a hit, or ``None`` when it has none."""

    if not isinstance(hit, Mapping):
        return None
    source = hit.get("_source")
    if not isinstance(source, Mapping):
        return None
    return source.get("eventData")


def _is_top_hits(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    inner = value.get("hits")
    return isinstance(inner, Mapping) and _is_sequence(inner.get("hits"))


def nested_top_hits(bucket: Any) -> List[Any]:
    """Return the hits of the ``top_hits`` sub-aggregation of a bucket, if any."""

    if not isinstance(bucket, Mapping):
        return []
    top_hits = _first_match(bucket, _is_top_hits)
    if top_hits is None:
        return []
    return list(top_hits["hits"]["hits"])


def extract_grouped_events(buckets: Sequence) -> List[Any]:
    """Collect nested top-hit events in bucket order, then hit order."""

    events: List[Any] = []
    for bucket in buckets:
        for hit in nested_top_hits(bucket):
            events.append(extract_event(hit))
    return events


def format_as_dto(response: Mapping) -> Dict[str, Any]:
    """Return totals, grouping buckets and hits of a search response."""

    hits = _hits(response)
    return {
        "totalValue": total_value(response),
        "groupedResults": select_grouping_buckets(response.get("aggregations")),
        "hitList": list(hits),
    }


def format_as_analytics(response: Mapping) -> Dict[str, Any]:
    """Return the event payloads of a search response.

    ``events`` has one entry per hit; hits without ``eventData`` keep their
    position as ``None``.
    """

    hits = _hits(response)
    buckets = select_grouping_buckets(response.get("aggregations"))
    return {
        "count": total_value(response),
        "events": [extract_event(hit) for hit in hits],
        "groupedEvents": extract_grouped_events(buckets),
    }


_FORMATTERS: Dict[str, Callable[[Mapping], Any]] = {
    "raw": lambda response: response,
    "dto": format_as_dto,
    "analytics": format_as_analytics,
}


def format_response(response: Mapping, response_format: str) -> Any:
    """Format ``response`` as ``raw``, ``dto`` or ``analytics``."""

    formatter = _FORMATTERS[validate_format(response_format)]
    return formatter(response)


__all__ = [
    "RESPONSE_FORMATS",
    "extract_event",
    "extract_grouped_events",
    "format_as_analytics",
    "format_as_dto",
    "format_response",
    "has_buckets",
    "nested_top_hits",
    "select_grouping_buckets",
    "total_value",
    "validate_format",
]
