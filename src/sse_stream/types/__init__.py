"""SSE client type definitions."""
from __future__ import annotations

from sse_stream.types.enums import ReadyState, TransportSignal, TransportState
from sse_stream.types.events import EventRecord, SSEvent
from sse_stream.types.config import SSEOptions, TransportTimeout

__all__ = [
    "ReadyState",
    "TransportSignal",
    "TransportState",
    "EventRecord",
    "SSEvent",
    "SSEOptions",
    "TransportTimeout",
]
