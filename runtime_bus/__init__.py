"""Runtime bus package: the invocation bridge between front-end and backend."""

from .bus import RuntimeBus
from . import topics
from .messages import MessageEnvelope, Notification

__all__ = ["RuntimeBus", "MessageEnvelope", "Notification", "topics"]
