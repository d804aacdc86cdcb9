"""Parsed and dispatchable event types."""
from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sse_stream.types.enums import ReadyState

if TYPE_CHECKING:
    from sse_stream.source import SSE


@dataclass(frozen=True)
class EventRecord:
    """One parsed SSE record.

    Every field is ``None`` until a line of the record sets it.
    """

    id: str | None = None
    event: str | None = None
    data: str | None = None
    retry: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.id is None and self.event is None and self.data is None and self.retry is None


@dataclass
class SSEvent:
    """An event handed to ``on<type>`` handlers and registered listeners."""

    type: str
    data: str = ""
    id: str | None = None
    last_event_id: str = ""
    ready_state: ReadyState | None = None
    error: Exception | None = field(default=None, compare=False)
    default_prevented: bool = field(default=False, compare=False)
    _source: Any = field(default=None, init=False, repr=False, compare=False)

    @property
    def source(self) -> SSE | None:
        """The controller that dispatched this event, if it is still alive."""
        if self._source is None:
            return None
        return self._source()

    @source.setter
    def source(self, value: SSE | None) -> None:
        self._source = weakref.ref(value) if value is not None else None

    def prevent_default(self) -> None:
        """Cancel the default action and stop propagation to listeners."""
        self.default_prevented = True
