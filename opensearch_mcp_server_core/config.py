"""Environment-driven settings for the OpenSearch connection."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .utils import _coalesce, _try_parse_bool, _try_parse_int


DEFAULT_URL = "http://localhost:9200"
DEFAULT_USER_NAME = "admin"
DEFAULT_INDEX_NAME = "analytics-events"
DEFAULT_TIMEOUT = 30

CONNECTION_HINT = "Check OPENSEARCH_URL, OPENSEARCH_USER_NAME, and OPENSEARCH_PASSWORD in .env file"


@dataclass(frozen=True)
class OpenSearchSettings:
    url: str
    username: str
    password: str
    index_name: str = DEFAULT_INDEX_NAME
    verify_certs: bool = False
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "OpenSearchSettings":
        """Build settings from ``OPENSEARCH_*`` and ``INDEX_NAME`` variables."""

        password = os.getenv("OPENSEARCH_PASSWORD")
        if not password:
            raise ValueError("Missing environment variables: OPENSEARCH_PASSWORD")

        timeout: Optional[int] = _try_parse_int(os.getenv("OPENSEARCH_TIMEOUT"))
        if timeout is not None and timeout <= 0:
            timeout = None

        return cls(
            url=os.getenv("OPENSEARCH_URL") or DEFAULT_URL,
            username=os.getenv("OPENSEARCH_USER_NAME") or DEFAULT_USER_NAME,
            password=password,
            index_name=os.getenv("INDEX_NAME") or DEFAULT_INDEX_NAME,
            verify_certs=_coalesce(_try_parse_bool(os.getenv("OPENSEARCH_VERIFY_CERTS")), False),
            timeout=_coalesce(timeout, DEFAULT_TIMEOUT),
        )


__all__ = [
    "CONNECTION_HINT",
    "DEFAULT_INDEX_NAME",
    "DEFAULT_TIMEOUT",
    "DEFAULT_URL",
    "DEFAULT_USER_NAME",
    "OpenSearchSettings",
]
