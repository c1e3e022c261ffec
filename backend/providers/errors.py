"""Research lookup failures, each mapped to an HTTP status and error body."""

from __future__ import annotations

from typing import Any, Optional

# Response header carrying ResearchError.kind across the HTTP boundary
ERROR_KIND_HEADER = "X-Error-Kind"


class ResearchError(Exception):
    """Base class for every research lookup failure."""

    status_code = 500
    kind = "research"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class InvalidIdentifierError(ResearchError):
    """Missing or empty company identifier; rejected before any network call."""

    status_code = 400
    kind = "invalid_identifier"


class ConfigurationError(ResearchError):
    """Provider credentials or settings are missing."""

    kind = "configuration"


class UpstreamError(ResearchError):
    """The provider was unreachable or answered with a non-success status.

    ``detail`` keeps the raw upstream text for logs; it is not shown to users.
    """

    kind = "upstream"

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        detail: str = "",
    ) -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail


class ParseError(ResearchError):
    """Provider content could not be read as a research record."""

    kind = "parse"

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "raw": self.raw}
