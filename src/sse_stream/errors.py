"""Error hierarchy for the SSE client.

Controllers never raise these from ``stream()`` or ``close()``; failures are
delivered as the ``error`` attribute of the dispatched ``error`` event.
"""
from __future__ import annotations


class SSEError(Exception):
    """Base error for all sse_stream errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigurationError(SSEError):
    """Invalid controller or transport configuration."""


class TransportError(SSEError):
    """The request failed or the server answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.body = body


class NetworkError(TransportError):
    """A network-level error occurred before or during the response."""


class RequestTimeoutError(TransportError):
    """Connecting or waiting for the next delivery timed out."""


def error_from_status(status_code: int, body: str = "") -> TransportError:
    """Build the error describing a non-2xx response."""
    return TransportError(
        f"Unexpected HTTP status {status_code}",
        status_code=status_code,
        body=body,
    )
