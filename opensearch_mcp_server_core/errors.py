"""Exception types raised by the formatter and the OpenSearch client."""

from __future__ import annotations

from typing import Any, Optional, Sequence


class InvalidFormatError(ValueError):
    """Raised when a caller asks for a response format that does not exist."""

    def __init__(self, received: Any, allowed: Sequence[str]):
        self.received = received
        self.allowed = tuple(allowed)
        super().__init__(
            f"Invalid format {received!r}. Format must be one of: {', '.join(self.allowed)}"
        )


class MalformedResponseError(ValueError):
    """Raised when a search response lacks the structure the formatter reads."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class SearchConnectionError(RuntimeError):
    """The search engine could not be reached."""

    def __init__(self, message: str, hint: Optional[str] = None):
        self.hint = hint
        super().__init__(message)


class SearchQueryError(RuntimeError):
    """The search engine rejected the query."""

    def __init__(self, message: str, status: Optional[int] = None, details: Any = None):
        self.status = status
        self.details = details
        super().__init__(message)


__all__ = [
    "InvalidFormatError",
    "MalformedResponseError",
    "SearchConnectionError",
    "SearchQueryError",
]
