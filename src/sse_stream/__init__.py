"""Server-Sent Events client with a configurable request."""
from __future__ import annotations

# Types
from sse_stream.types.enums import ReadyState, TransportSignal, TransportState
from sse_stream.types.events import EventRecord, SSEvent
from sse_stream.types.config import SSEOptions, TransportTimeout

# Errors
from sse_stream.errors import (
    SSEError,
    ConfigurationError,
    TransportError,
    NetworkError,
    RequestTimeoutError,
    error_from_status,
)

# Parsing
from sse_stream._parser import parse_event_chunk, split_chunks

# Transports
from sse_stream.transport import BaseTransport, StubTransport, Transport
from sse_stream._http import HttpxTransport

# Core
from sse_stream.source import SSE

__all__ = [
    # Types
    "ReadyState",
    "TransportSignal",
    "TransportState",
    "EventRecord",
    "SSEvent",
    "SSEOptions",
    "TransportTimeout",
    # Errors
    "SSEError",
    "ConfigurationError",
    "TransportError",
    "NetworkError",
    "RequestTimeoutError",
    "error_from_status",
    # Parsing
    "parse_event_chunk",
    "split_chunks",
    # Transports
    "BaseTransport",
    "StubTransport",
    "Transport",
    "HttpxTransport",
    # Core
    "SSE",
]
