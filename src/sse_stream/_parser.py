"""Server-Sent Events chunk parser.

A *chunk* is one blank-line-delimited record of the ``text/event-stream``
format. Parsing follows the field rules of
https://html.spec.whatwg.org/multipage/server-sent-events.html#event-stream-interpretation:

- Lines beginning with ``:`` are comments (ignored).
- ``field: value`` lines set a field; one leading space of the value is dropped.
- A line without ``:`` names a field with an empty value.
- Only ``id``, ``event``, ``data`` and ``retry`` are recognised.
- Repeated ``data`` lines are joined with ``\\n``.
"""
from __future__ import annotations

import dataclasses
import re
from functools import reduce

from sse_stream.types.events import EventRecord

FIELD_SEPARATOR = ":"
FIELDS = frozenset({"id", "event", "data", "retry"})

EVENT_DELIMITER = re.compile(r"\r\n\r\n|\r\r|\n\n")
LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_chunks(text: str) -> tuple[list[str], str]:
    """Split *text* into complete chunks and the trailing remainder.

    The remainder is always withheld, even when it looks complete, because
    more bytes for it may still be in flight.
    """
    parts = EVENT_DELIMITER.split(text)
    return parts[:-1], parts[-1]


def parse_line(line: str) -> tuple[str, str] | None:
    """Split one line into ``(field, value)``, or ``None`` for a comment."""
    index = line.find(FIELD_SEPARATOR)
    if index == 0:
        return None
    if index < 0:
        return line, ""
    value = line[index + 1:]
    if value.startswith(" "):
        value = value[1:]
    return line[:index], value


def _apply_line(record: EventRecord, line: str) -> EventRecord:
    parsed = parse_line(line)
    if parsed is None:
        return record
    name, value = parsed
    if name not in FIELDS:
        return record
    if name == "data" and record.data is not None:
        value = record.data + "\n" + value
    return dataclasses.replace(record, **{name: value})


def parse_event_chunk(chunk: str) -> EventRecord | None:
    """Parse one chunk into an :class:`EventRecord`.

    Returns ``None`` for an empty chunk or one made only of comments and
    unrecognised fields.
    """
    if not chunk:
        return None
    record = reduce(_apply_line, LINE_BREAK.split(chunk), EventRecord())
    if record.is_empty:
        return None
    return record
