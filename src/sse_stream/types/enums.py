"""Enumeration types for the SSE client."""
from __future__ import annotations

from enum import IntEnum, StrEnum


class ReadyState(IntEnum):
    """Connection lifecycle stage of an :class:`~sse_stream.source.SSE`."""

    INITIALIZING = -1
    CONNECTING = 0
    OPEN = 1
    CLOSED = 2


class TransportState(IntEnum):
    """Request lifecycle stage of a transport handle."""

    UNSENT = 0
    OPENED = 1
    HEADERS_RECEIVED = 2
    LOADING = 3
    DONE = 4


class TransportSignal(StrEnum):
    """Signals a transport emits to its registered listeners."""

    PROGRESS = "progress"
    LOAD = "load"
    READY_STATE_CHANGE = "readystatechange"
    ERROR = "error"
    ABORT = "abort"
