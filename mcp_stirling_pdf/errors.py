"""Error types raised while serving a tool call.

Every handler converts these into a failure text, so none of them ever
reaches the MCP transport.
"""

from typing import Optional


class StirlingPdfError(Exception):
    """Base class for failures a tool call can report."""

    error_code = "E_INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StirlingPdfError):
    """A required argument is missing/empty or a cardinality rule is violated."""

    error_code = "E_VALIDATION"


class DecodeError(StirlingPdfError):
    """Input payload is not a valid base64 string or data URL."""

    error_code = "E_DECODE"


class TransportError(StirlingPdfError):
    """The Stirling PDF API could not be reached (refused, DNS, timeout)."""

    error_code = "E_TRANSPORT"

    def __init__(self, message: str, timed_out: bool = False):
        self.timed_out = timed_out
        super().__init__(message)


class UpstreamError(StirlingPdfError):
    """The Stirling PDF API answered with a non-2xx status."""

    error_code = "E_UPSTREAM"

    # The body may be an HTML error page, so it is kept as plain text.
    MAX_BODY_CHARS = 1000

    def __init__(self, status_code: int, reason: Optional[str] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason or ""
        self.body = body or ""
        detail = self.body.strip()[: self.MAX_BODY_CHARS] or self.reason or "Unknown Error"
        super().__init__(f"Stirling PDF API returned {status_code}: {detail}")


class UnknownOperationError(StirlingPdfError):
    """No tool is registered under the requested name."""

    error_code = "E_UNKNOWN_TOOL"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")
