"""Stream controller: turns a transport's growing response text into events."""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from sse_stream._http import HttpxTransport
from sse_stream._parser import parse_event_chunk, split_chunks
from sse_stream.errors import ConfigurationError, error_from_status
from sse_stream.transport import Transport
from sse_stream.types.config import SSEOptions
from sse_stream.types.enums import ReadyState, TransportSignal, TransportState
from sse_stream.types.events import SSEvent

Listener = Callable[[SSEvent], Any]
TransportFactory = Callable[[], Transport]


class SSE:
    """Server-Sent Events consumer with a configurable request.

    Unlike the browser ``EventSource``, the request method, headers and body
    are chosen by the caller. Events are delivered to the ``on<type>``
    attribute first (``onmessage``, ``onopen``, ``onerror``, ...) and then to
    every listener registered for that type with :meth:`add_event_listener`.

    Failures never raise out of :meth:`stream` or :meth:`close`; they arrive
    as ``error`` and ``abort`` events followed by the ``CLOSED`` transition.
    The controller does not reconnect on its own. Calling :meth:`close` and
    then :meth:`stream` reconnects and sends ``Last-Event-ID``.
    """

    onmessage: Listener | None = None
    onopen: Listener | None = None
    onerror: Listener | None = None
    onabort: Listener | None = None
    onreadystatechange: Listener | None = None

    def __init__(
        self,
        url: str,
        options: SSEOptions | None = None,
        *,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        if not url:
            raise ConfigurationError("url must not be empty")
        self.url = url
        self.options = options or SSEOptions()
        self.headers = dict(self.options.headers)
        self.payload = self.options.payload
        self.method = self.options.effective_method
        self.with_credentials = self.options.with_credentials
        self.debug = self.options.debug
        self._log = self.options.logger or logging.getLogger("sse_stream")
        self._transport_factory = transport_factory or self._default_transport

        self.listeners: dict[str, list[Listener]] = {}
        self.transport: Transport | None = None
        self.ready_state = ReadyState.INITIALIZING
        self.last_event_id = ""
        self._consumed = 0
        self._chunk = ""
        self._lock = threading.RLock()
        self._closed = threading.Event()

        if self.options.start:
            self.stream()

    def __enter__(self) -> SSE:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SSE({self.method} {self.url!r}, ready_state={self.ready_state.name})"

    def _default_transport(self) -> Transport:
        return HttpxTransport(timeout=self.options.timeout, logger=self._log)

    # --- listeners --------------------------------------------------------------

    def add_event_listener(self, type: str, listener: Listener) -> None:
        """Register *listener* for events of *type*; duplicates are ignored."""
        with self._lock:
            registered = self.listeners.setdefault(type, [])
            if not any(existing is listener for existing in registered):
                registered.append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        with self._lock:
            registered = self.listeners.get(type)
            if registered is None:
                return
            remaining = [existing for existing in registered if existing is not listener]
            if remaining:
                self.listeners[type] = remaining
            else:
                del self.listeners[type]

    def dispatch_event(self, event: SSEvent | None) -> bool:
        """Deliver *event* and return ``False`` if any handler cancelled it.

        The ``on<type>`` handler runs first. If it cancels the event, the
        registered listeners are skipped. Otherwise all of them run in
        registration order.
        """
        if event is None:
            return True
        if self.debug:
            self._log.debug("Dispatching %r", event)

        event.source = self
        handler = getattr(self, f"on{event.type}", None)
        if callable(handler):
            handler(event)
            if event.default_prevented:
                return False

        with self._lock:
            listeners = list(self.listeners.get(event.type, ()))
        for listener in listeners:
            listener(event)
        return not event.default_prevented

    # --- lifecycle --------------------------------------------------------------

    def stream(self) -> None:
        """Open the connection. Does nothing while a transport is attached."""
        with self._lock:
            if self.transport is not None:
                return

            self._consumed = 0
            self._chunk = ""
            self._closed.clear()
            self._set_ready_state(ReadyState.CONNECTING)

            transport = self._transport_factory()
            self.transport = transport
            transport.add_listener(TransportSignal.PROGRESS, self._on_stream_progress)
            transport.add_listener(TransportSignal.LOAD, self._on_stream_loaded)
            transport.add_listener(TransportSignal.READY_STATE_CHANGE, self._check_stream_closed)
            transport.add_listener(TransportSignal.ERROR, self._on_stream_failure)
            transport.add_listener(TransportSignal.ABORT, self._on_stream_abort)

            transport.open(self.method, self.url)
            for name, value in self.headers.items():
                transport.set_header(name, value)
            if self.last_event_id:
                transport.set_header("Last-Event-ID", self.last_event_id)
            transport.set_credentials_mode(self.with_credentials)
            self._log.debug("Connecting: %s %s", self.method, self.url)
            transport.send(self.payload)

    def close(self) -> None:
        """Abort the connection and move to ``CLOSED``. Idempotent."""
        with self._lock:
            transport, self.transport = self.transport, None
            if self.ready_state == ReadyState.CLOSED:
                return
            if transport is not None:
                transport.abort()
            self._set_ready_state(ReadyState.CLOSED)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the controller is ``CLOSED``; return whether it is.

        A controller that was never started cannot close on its own, so this
        returns ``False`` at once while it is ``INITIALIZING``.
        """
        if self.ready_state == ReadyState.INITIALIZING:
            return False
        return self._closed.wait(timeout)

    def _set_ready_state(self, state: ReadyState) -> None:
        self.ready_state = state
        self.dispatch_event(SSEvent(type="readystatechange", ready_state=state))
        # A readystatechange handler may already have reconnected
        if state == ReadyState.CLOSED and self.ready_state == ReadyState.CLOSED:
            self._log.debug("Closed: %s %s", self.method, self.url)
            self._closed.set()

    # --- transport signals ------------------------------------------------------

    def _on_stream_failure(self, transport: Transport) -> None:
        with self._lock:
            if transport is not self.transport:
                return
            error = transport.error
            if error is None and transport.status is not None:
                error = error_from_status(transport.status, transport.response_text)
            self._log.warning("Stream failed: %s %s: %s", self.method, self.url, error)
            self.dispatch_event(
                SSEvent(type="error", data=transport.response_text, error=error)
            )
            self.close()

    def _on_stream_abort(self, transport: Transport) -> None:
        with self._lock:
            if transport is not self.transport:
                return
            self.dispatch_event(SSEvent(type="abort"))
            self.close()

    def _on_stream_progress(self, transport: Transport) -> bool:
        """Parse newly delivered text; return ``False`` if the stream failed."""
        with self._lock:
            if transport is not self.transport:
                return False

            status = transport.status
            if status is None or not 200 <= status < 300:
                self._on_stream_failure(transport)
                return False

            if self.ready_state == ReadyState.CONNECTING:
                self.dispatch_event(SSEvent(type="open"))
                self._set_ready_state(ReadyState.OPEN)

            data = transport.response_text[self._consumed:]
            self._consumed += len(data)
            chunks, self._chunk = split_chunks(self._chunk + data)
            for chunk in chunks:
                self.dispatch_event(self._parse_event_chunk(chunk))
                # A handler may have closed or replaced the connection
                if transport is not self.transport:
                    return False
            return True

    def _on_stream_loaded(self, transport: Transport) -> None:
        with self._lock:
            if not self._on_stream_progress(transport):
                return
            chunk, self._chunk = self._chunk, ""
            self.dispatch_event(self._parse_event_chunk(chunk))

    def _check_stream_closed(self, transport: Transport) -> None:
        with self._lock:
            if transport is not self.transport:
                return
            if transport.state == TransportState.DONE and self.ready_state != ReadyState.CLOSED:
                self._set_ready_state(ReadyState.CLOSED)

    def _parse_event_chunk(self, chunk: str) -> SSEvent | None:
        if self.debug and chunk:
            self._log.debug("Parsing chunk: %r", chunk)
        record = parse_event_chunk(chunk)
        if record is None:
            return None
        if record.id is not None:
            self.last_event_id = record.id
        return SSEvent(
            type=record.event or "message",
            data=record.data or "",
            id=record.id,
            last_event_id=self.last_event_id,
        )
