"""Transport collaborator interface.

A transport performs one request and reports its progress through signals.
The SSE controller only relies on the members of :class:`Transport`.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from sse_stream.errors import NetworkError, SSEError
from sse_stream.types.enums import TransportSignal, TransportState

TransportCallback = Callable[["Transport"], None]


@runtime_checkable
class Transport(Protocol):
    """Protocol every transport handle must satisfy."""

    @property
    def response_text(self) -> str:
        """All text received so far. Grows monotonically, never resets."""
        ...

    @property
    def status(self) -> int | None:
        """HTTP status once the response headers arrived."""
        ...

    @property
    def state(self) -> TransportState:
        ...

    @property
    def error(self) -> Exception | None:
        """The failure reported with the ``error`` signal, if any."""
        ...

    def add_listener(self, signal: TransportSignal, callback: TransportCallback) -> None:
        ...

    def open(self, method: str, url: str) -> None:
        ...

    def set_header(self, name: str, value: str) -> None:
        ...

    def set_credentials_mode(self, with_credentials: bool) -> None:
        ...

    def send(self, body: str = "") -> None:
        ...

    def abort(self) -> None:
        """Request immediate termination; later signals may be dropped."""
        ...


class BaseTransport:
    """Signal registry and request bookkeeping shared by concrete transports."""

    def __init__(self) -> None:
        self._listeners: dict[TransportSignal, list[TransportCallback]] = {}
        self._state = TransportState.UNSENT
        self._status: int | None = None
        self._response_text = ""
        self._error: Exception | None = None
        self.method = ""
        self.url = ""
        self.headers: dict[str, str] = {}
        self.with_credentials = False

    @property
    def response_text(self) -> str:
        return self._response_text

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def error(self) -> Exception | None:
        return self._error

    def add_listener(self, signal: TransportSignal, callback: TransportCallback) -> None:
        self._listeners.setdefault(TransportSignal(signal), []).append(callback)

    def open(self, method: str, url: str) -> None:
        if self._state != TransportState.UNSENT:
            raise SSEError("open() may only be called once per transport")
        self.method = method
        self.url = url
        self._set_state(TransportState.OPENED)

    def set_header(self, name: str, value: str) -> None:
        if self._state != TransportState.OPENED:
            raise SSEError("set_header() must be called between open() and send()")
        self.headers[name] = value

    def set_credentials_mode(self, with_credentials: bool) -> None:
        self.with_credentials = bool(with_credentials)

    def send(self, body: str = "") -> None:
        raise NotImplementedError

    def abort(self) -> None:
        raise NotImplementedError

    def _fire(self, signal: TransportSignal) -> None:
        for callback in list(self._listeners.get(signal, [])):
            callback(self)

    def _set_state(self, state: TransportState) -> None:
        self._state = state
        self._fire(TransportSignal.READY_STATE_CHANGE)


class StubTransport(BaseTransport):
    """In-memory transport driven by hand, for testing.

    Completion emits ``load`` and then moves to ``DONE``; failures and aborts
    emit their signal and then move to ``DONE``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.body: str | None = None
        self.aborted = False

    def send(self, body: str = "") -> None:
        if self._state != TransportState.OPENED:
            raise SSEError("send() called before open()")
        self.body = body

    def respond(self, status: int = 200) -> None:
        """Receive response headers with *status*."""
        self._status = status
        self._set_state(TransportState.HEADERS_RECEIVED)

    def deliver(self, text: str) -> None:
        """Append *text* to the response and emit ``progress``."""
        if self._status is None:
            self.respond(200)
        self._response_text += text
        if self._state != TransportState.LOADING:
            self._set_state(TransportState.LOADING)
        self._fire(TransportSignal.PROGRESS)

    def finish(self) -> None:
        """Complete the response normally."""
        if self._status is None:
            self.respond(200)
        self._fire(TransportSignal.LOAD)
        self._set_state(TransportState.DONE)

    def fail(self, error: Exception | None = None) -> None:
        """Fail the request at the network level."""
        self._error = error or NetworkError("connection reset")
        self._fire(TransportSignal.ERROR)
        self._set_state(TransportState.DONE)

    def abort(self) -> None:
        if self.aborted or self._state == TransportState.DONE:
            return
        self.aborted = True
        self._fire(TransportSignal.ABORT)
        self._set_state(TransportState.DONE)
