import json
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import anyio
import httpx  # type: ignore[import]
import pytest
from dotenv import load_dotenv  # type: ignore[import]

from mcp.client.session_group import ClientSessionGroup, SseServerParameters  # type: ignore[import]


ROOT = Path(__file__).resolve().parent.parent
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


load_dotenv()


@dataclass
class IntegrationHarness:
    mode: str
    module: Any
    search_client: Any | None
    call_query: Callable[..., dict[str, Any]]


def _resolve_integration_modes() -> list[str]:
    raw = os.getenv("INTEGRATION_TARGETS")
    if raw:
        modes = [entry.strip() for entry in raw.split(",") if entry.strip()]
        return modes or ["manual"]

    modes = ["manual"]
    if os.getenv("INTEGRATION_SSE_URL"):
        modes.append("sse")
    return modes


def _require_env(vars_: list[str]) -> None:
    missing = [name for name in vars_ if not os.getenv(name)]
    if missing:
        pytest.skip(f"Missing OpenSearch configuration: {', '.join(missing)}")


def _call_query_via_sse(url: str, arguments: dict[str, Any]) -> dict[str, Any]:
    async def _run(payload: dict[str, Any]) -> dict[str, Any]:
        async with ClientSessionGroup() as group:
            await group.connect_to_server(SseServerParameters(url=url))
            result = await group.call_tool("execute_opensearch_query", payload)
            if result.isError:
                raise AssertionError(f"MCP query tool returned error: {result}")
            if result.structuredContent is not None:
                return result.structuredContent

            for entry in result.content or []:
                parsed = json.loads(entry.text)
                if isinstance(parsed, dict):
                    return parsed

            raise AssertionError("MCP query tool response missing structured content")

    return anyio.run(_run, arguments)


def _wait_for_sse(url: str, timeout: float = 30.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            with httpx.Client(timeout=httpx.Timeout(2.0, read=2.0)) as client:
                with client.stream("GET", url, headers={"Accept": "text/event-stream"}) as response:
                    if response.status_code == httpx.codes.OK:
                        return True
        except httpx.HTTPError:
            pass
        time.sleep(1.0)
    return False


@pytest.fixture
def search_response_factory():
    """Build OpenSearch ``_search`` bodies shaped like the analytics-events index."""

    def _hit(event_id: str, *, with_event: bool = True, score: float | None = 1.0) -> dict[str, Any]:
        source: dict[str, Any] = {"metadata": {"resultId": f"r-{event_id}", "alertId": f"a-{event_id}"}}
        if with_event:
            source["eventData"] = {
                "eventId": event_id,
                "moduleId": "CROWD_COUNT",
                "eventSourceId": f"cam-{event_id}",
                "eventDateTime": "2024-05-01T10:00:00Z",
            }
        return {"_id": event_id, "_index": "analytics-events", "_score": score, "_source": source}

    def _build(
        event_ids: list[str] | None = None,
        *,
        total: Any = None,
        aggregations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        hits = [_hit(event_id) for event_id in (event_ids or [])]
        response: dict[str, Any] = {
            "took": 4,
            "timed_out": False,
            "_shards": {"total": 1, "successful": 1, "skipped": 0, "failed": 0},
            "hits": {
                "total": total if total is not None else {"value": len(hits), "relation": "eq"},
                "max_score": 1.0 if hits else None,
                "hits": hits,
            },
        }
        if aggregations is not None:
            response["aggregations"] = aggregations
        return response

    _build.hit = _hit
    return _build


@pytest.fixture(scope="module")
def opensearch_module():
    load_dotenv()
    if os.getenv("ENABLE_INTEGRATION_TESTS", "false").lower() != "true":
        pytest.skip("Integration tests disabled. Set ENABLE_INTEGRATION_TESTS=true to enable.")

    _require_env(["OPENSEARCH_PASSWORD"])

    import importlib

    module = importlib.import_module("opensearch_mcp_server")
    if module.search_client is None:
        pytest.skip("OpenSearch client failed to initialize; check configuration.")
    return module


@pytest.fixture(scope="module", params=_resolve_integration_modes())
def integration_harness(request, opensearch_module):
    mode = request.param
    module = opensearch_module

    if mode == "manual":
        return IntegrationHarness(
            mode=mode,
            module=module,
            search_client=module.search_client,
            call_query=module.execute_opensearch_query,
        )

    if mode == "sse":
        sse_url = os.getenv("INTEGRATION_SSE_URL")
        if not sse_url:
            pytest.skip("INTEGRATION_SSE_URL is not set.")
        if not _wait_for_sse(sse_url):
            pytest.fail(f"MCP server at {sse_url} did not become ready in time.")

        def _call_query(**kwargs: Any) -> dict[str, Any]:
            arguments = {key: value for key, value in kwargs.items() if value is not None}
            return _call_query_via_sse(sse_url, arguments)

        return IntegrationHarness(
            mode=mode,
            module=module,
            search_client=None,
            call_query=_call_query,
        )

    pytest.skip(f"Unknown integration mode: {mode}")
