"""Configuration types."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from sse_stream.errors import ConfigurationError


@dataclass(frozen=True)
class TransportTimeout:
    """Timeout settings used by :class:`~sse_stream._http.HttpxTransport`.

    ``read`` bounds the gap between two deliveries; ``None`` waits forever,
    which suits long-lived streams.
    """

    connect: float = 5.0
    read: float | None = None


@dataclass(frozen=True)
class SSEOptions:
    """Request and behaviour options for an SSE controller."""

    headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    payload: str = ""
    method: str | None = None
    with_credentials: bool = False
    start: bool = True
    debug: bool = False
    timeout: TransportTimeout = field(default_factory=TransportTimeout)
    logger: logging.Logger | None = field(default=None, compare=False, hash=False)

    def __post_init__(self) -> None:
        if self.method is not None and not self.method.strip():
            raise ConfigurationError("method must be a non-empty string")
        # Copy so later mutation of the caller's mapping does not leak in
        object.__setattr__(self, "headers", dict(self.headers))

    @property
    def effective_method(self) -> str:
        """The configured method, or ``POST`` when a payload is set, else ``GET``."""
        if self.method:
            return self.method.upper()
        return "POST" if self.payload else "GET"
