"""Streaming transport built on httpx."""
from __future__ import annotations

import logging
import threading

import httpx

from sse_stream.errors import NetworkError, RequestTimeoutError, SSEError
from sse_stream.transport import BaseTransport
from sse_stream.types.config import TransportTimeout
from sse_stream.types.enums import TransportSignal, TransportState


class HttpxTransport(BaseTransport):
    """Performs the request on a daemon thread and reports it through signals.

    A 2xx response emits one ``progress`` per decoded text chunk. Any other
    status has its whole body read first and emits a single ``progress``.
    Both then emit ``load`` and move to ``DONE``. Transport failures are
    mapped to :class:`NetworkError` or :class:`RequestTimeoutError` and
    emitted as ``error``. After :meth:`abort` nothing further is emitted.

    When no *client* is supplied, one is built per request and closed
    afterwards. It keeps the httpx environment defaults (proxies, CA bundles,
    netrc). ``with_credentials`` is recorded on the transport only. A
    caller-supplied client sends its own cookies and auth as configured.

    An exception raised by a listener on the worker thread is logged and
    reported as an ``error`` signal, so the request always ends in ``DONE``.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: TransportTimeout | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__()
        self._client = client
        self._timeout = timeout or TransportTimeout()
        self._log = logger or logging.getLogger("sse_stream")
        self._lock = threading.Lock()
        self._response: httpx.Response | None = None
        self._aborted = False
        self._thread: threading.Thread | None = None

    def send(self, body: str = "") -> None:
        if self._state != TransportState.OPENED:
            raise SSEError("send() called before open()")
        self._thread = threading.Thread(
            target=self._run,
            args=(body,),
            name=f"sse-transport {self.method} {self.url}",
            daemon=True,
        )
        self._thread.start()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker thread; return whether it has finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def abort(self) -> None:
        with self._lock:
            if self._aborted or self._state == TransportState.DONE:
                return
            self._aborted = True
            response = self._response
        if response is not None:
            response.close()
        self._log.debug("Transport aborted: %s %s", self.method, self.url)
        self._fire(TransportSignal.ABORT)
        self._set_state(TransportState.DONE)

    # --- worker ---------------------------------------------------------------

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(
                connect=self._timeout.connect,
                read=self._timeout.read,
                write=self._timeout.connect,
                pool=self._timeout.connect,
            ),
        )

    def _run(self, body: str) -> None:
        client = self._client or self._build_client()
        try:
            with client.stream(
                self.method, self.url, headers=self.headers, content=body or None
            ) as response:
                with self._lock:
                    if self._aborted:
                        return
                    self._response = response
                    self._status = response.status_code
                if not self._advance(TransportState.HEADERS_RECEIVED):
                    return
                if response.is_success:
                    for text in response.iter_text():
                        if text and not self._receive(text):
                            return
                else:
                    response.read()
                    if not self._receive(response.text):
                        return
            if self._emit(TransportSignal.LOAD):
                self._advance(TransportState.DONE)
        except httpx.TimeoutException as exc:
            self._fail(RequestTimeoutError(str(exc), status_code=self._status, cause=exc))
        except (httpx.HTTPError, httpx.StreamError) as exc:
            self._fail(NetworkError(str(exc), status_code=self._status, cause=exc))
        except Exception as exc:
            self._log.exception("Listener raised on %s %s", self.method, self.url)
            self._fail(SSEError(f"Listener raised: {exc!r}", cause=exc))
        finally:
            if self._client is None:
                client.close()

    def _receive(self, text: str) -> bool:
        with self._lock:
            if self._aborted:
                return False
            self._response_text += text
        if self._state != TransportState.LOADING and not self._advance(TransportState.LOADING):
            return False
        return self._emit(TransportSignal.PROGRESS)

    def _fail(self, error: SSEError) -> None:
        with self._lock:
            if self._aborted:
                return
            self._error = error
        self._log.warning("Transport failed: %s %s: %s", self.method, self.url, error)
        if self._emit(TransportSignal.ERROR):
            self._advance(TransportState.DONE)

    def _emit(self, signal: TransportSignal) -> bool:
        with self._lock:
            if self._aborted:
                return False
        self._fire(signal)
        return True

    def _advance(self, state: TransportState) -> bool:
        with self._lock:
            if self._aborted:
                return False
        self._set_state(state)
        return True
