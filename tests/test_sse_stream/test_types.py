"""Tests for sse_stream.types."""
from __future__ import annotations

import gc
import logging

import pytest

from sse_stream.errors import ConfigurationError
from sse_stream.source import SSE
from sse_stream.types.config import SSEOptions, TransportTimeout
from sse_stream.types.enums import ReadyState, TransportSignal, TransportState
from sse_stream.types.events import EventRecord, SSEvent


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TestReadyState:
    def test_values(self) -> None:
        assert ReadyState.INITIALIZING == -1
        assert ReadyState.CONNECTING == 0
        assert ReadyState.OPEN == 1
        assert ReadyState.CLOSED == 2

    def test_lifecycle_order(self) -> None:
        assert list(ReadyState) == [
            ReadyState.INITIALIZING,
            ReadyState.CONNECTING,
            ReadyState.OPEN,
            ReadyState.CLOSED,
        ]


def test_transport_state_done() -> None:
    assert TransportState.DONE == 4


def test_transport_signal_values() -> None:
    assert TransportSignal.READY_STATE_CHANGE == "readystatechange"
    assert TransportSignal("progress") is TransportSignal.PROGRESS


# ---------------------------------------------------------------------------
# EventRecord
# ---------------------------------------------------------------------------


class TestEventRecord:
    def test_defaults_are_none(self) -> None:
        record = EventRecord()
        assert record.id is None
        assert record.event is None
        assert record.data is None
        assert record.retry is None
        assert record.is_empty

    def test_not_empty_with_any_field(self) -> None:
        assert not EventRecord(retry="10").is_empty

    def test_frozen(self) -> None:
        record = EventRecord()
        with pytest.raises(AttributeError):
            record.data = "x"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# SSEvent
# ---------------------------------------------------------------------------


class TestSSEvent:
    def test_defaults(self) -> None:
        event = SSEvent(type="message")
        assert event.data == ""
        assert event.id is None
        assert event.last_event_id == ""
        assert event.ready_state is None
        assert event.error is None
        assert event.default_prevented is False
        assert event.source is None

    def test_prevent_default(self) -> None:
        event = SSEvent(type="message")
        event.prevent_default()
        assert event.default_prevented is True

    def test_source_is_weak(self) -> None:
        source = SSE("http://example.test/stream", SSEOptions(start=False))
        event = SSEvent(type="message")
        event.source = source
        assert event.source is source
        del source
        gc.collect()
        assert event.source is None

    def test_source_can_be_cleared(self) -> None:
        event = SSEvent(type="message")
        event.source = None
        assert event.source is None


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestTransportTimeout:
    def test_defaults(self) -> None:
        t = TransportTimeout()
        assert t.connect == 5.0
        assert t.read is None

    def test_frozen(self) -> None:
        t = TransportTimeout()
        with pytest.raises(AttributeError):
            t.connect = 1.0  # type: ignore[misc]


class TestSSEOptions:
    def test_defaults(self) -> None:
        opts = SSEOptions()
        assert opts.headers == {}
        assert opts.payload == ""
        assert opts.method is None
        assert opts.with_credentials is False
        assert opts.start is True
        assert opts.debug is False
        assert opts.logger is None

    def test_method_defaults_to_get(self) -> None:
        assert SSEOptions().effective_method == "GET"

    def test_method_defaults_to_post_with_payload(self) -> None:
        assert SSEOptions(payload='{"q": 1}').effective_method == "POST"

    def test_explicit_method_wins(self) -> None:
        assert SSEOptions(payload="x", method="put").effective_method == "PUT"

    def test_blank_method_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            SSEOptions(method=" ")

    def test_headers_copied(self) -> None:
        headers = {"Authorization": "Bearer a"}
        opts = SSEOptions(headers=headers)
        headers["Authorization"] = "Bearer b"
        assert opts.headers == {"Authorization": "Bearer a"}

    def test_logger_excluded_from_comparison(self) -> None:
        assert SSEOptions(logger=logging.getLogger("a")) == SSEOptions()

    def test_hashable_with_headers(self) -> None:
        opts = SSEOptions(headers={"A": "1"})
        assert hash(opts) == hash(SSEOptions(headers={"A": "1"}))
        assert opts in {SSEOptions(headers={"A": "1"})}
