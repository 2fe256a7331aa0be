from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class MessageEnvelope:
    """Standard message envelope for all runtime bus traffic.

    ``payload`` is whatever the publisher handed over: a mapping for most
    preference events, ``None`` for ``preferences-cleared``.
    """

    msg_id: str
    type: str
    timestamp: str
    source: str
    payload: object = None
    trace_id: str = ""
    target: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Notification:
    """An event a state change wants published once the change is persisted."""

    topic: str
    payload: object = None
