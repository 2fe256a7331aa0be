from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from diagnostics.logging_setup import get_logger

from .messages import MessageEnvelope, Notification

logger = get_logger(__name__)

Handler = Callable[[MessageEnvelope], None]
RequestHandler = Callable[[MessageEnvelope], Dict[str, object]]


def _iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class RuntimeBus:
    """In-process pub/sub and request-reply bus.

    Commands from the front-end are request handlers; notifications back to it
    are publications. Topics published with ``sticky=True`` keep their last
    envelope so a subscriber attaching later can ask for it with
    ``replay_last=True``.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._subscribers: Dict[str, tuple[str, Handler]] = {}
        self._topic_index: Dict[str, set[str]] = {}
        self._request_handlers: Dict[str, RequestHandler] = {}
        self._sticky: Dict[str, MessageEnvelope] = {}

    def subscribe(self, topic: str, handler: Handler, *, replay_last: bool = False) -> str:
        sub_id = str(uuid.uuid4())
        with self._lock:
            self._subscribers[sub_id] = (topic, handler)
            self._topic_index.setdefault(topic, set()).add(sub_id)
            last = self._sticky.get(topic) if replay_last else None
        if last is not None:
            self._deliver(handler, last)
        return sub_id

    def unsubscribe(self, sub_id: str) -> None:
        with self._lock:
            topic, _ = self._subscribers.pop(sub_id, (None, None))
            if topic and topic in self._topic_index:
                self._topic_index[topic].discard(sub_id)
                if not self._topic_index[topic]:
                    self._topic_index.pop(topic, None)

    def register_handler(self, topic: str, handler: RequestHandler) -> None:
        with self._lock:
            self._request_handlers[topic] = handler

    def request_topics(self) -> List[str]:
        with self._lock:
            return sorted(self._request_handlers)

    def publish(
        self,
        topic: str,
        payload: object,
        source: str,
        trace_id: Optional[str] = None,
        *,
        sticky: bool = False,
    ) -> MessageEnvelope:
        envelope = self._build_envelope(topic, payload, source, trace_id)
        with self._lock:
            if sticky:
                self._sticky[topic] = envelope
        for handler in self._copy_handlers(topic):
            self._deliver(handler, envelope)
        return envelope

    def publish_notifications(
        self,
        notifications: Iterable[Notification],
        source: str,
        trace_id: Optional[str] = None,
    ) -> List[MessageEnvelope]:
        return [
            self.publish(note.topic, note.payload, source, trace_id)
            for note in notifications
        ]

    def request(
        self,
        topic: str,
        payload: Optional[Dict[str, object]],
        source: str,
        timeout_ms: Optional[int] = None,
        trace_id: Optional[str] = None,
    ) -> Dict[str, object]:
        handler = self._get_request_handler(topic)
        if handler is None:
            return {"ok": False, "error": "no_handler", "message": f"No handler for '{topic}'"}

        envelope = self._build_envelope(topic, payload, source, trace_id, target="request")
        if timeout_ms is None:
            return self._invoke(topic, handler, envelope)

        done = threading.Event()
        response: Dict[str, object] = {}

        def _run():
            nonlocal response
            try:
                response = self._invoke(topic, handler, envelope)
            finally:
                done.set()

        thread = threading.Thread(target=_run, name=f"bus-request-{topic}", daemon=True)
        thread.start()

        if not done.wait(timeout_ms / 1000):
            return {"ok": False, "error": "timeout", "message": f"'{topic}' timed out"}
        return response

    def get_stats(self) -> Dict[str, object]:
        with self._lock:
            by_topic = {topic: len(ids) for topic, ids in self._topic_index.items()}
            return {
                "subscriber_count": len(self._subscribers),
                "request_handler_count": len(self._request_handlers),
                "sticky_topic_count": len(self._sticky),
                "sticky_topics": sorted(self._sticky),
                "subscriptions_by_topic": by_topic,
                "request_topics": sorted(self._request_handlers),
            }

    def _invoke(
        self, topic: str, handler: RequestHandler, envelope: MessageEnvelope
    ) -> Dict[str, object]:
        try:
            result = handler(envelope)
        except Exception as exc:
            logger.exception("runtime_bus request handler error on %s", topic)
            return {"ok": False, "error": "handler_error", "message": str(exc)}
        if not isinstance(result, dict):
            return {"ok": False, "error": "invalid_response", "message": f"'{topic}' replied {type(result).__name__}"}
        return result

    def _deliver(self, handler: Handler, envelope: MessageEnvelope) -> None:
        try:
            handler(envelope)
        except Exception as exc:
            logger.error("runtime_bus publish handler error on %s: %s", envelope.type, exc)

    def _build_envelope(
        self,
        topic: str,
        payload: object,
        source: str,
        trace_id: Optional[str],
        target: Optional[str] = None,
    ) -> MessageEnvelope:
        trace = trace_id or str(uuid.uuid4())
        body = dict(payload) if isinstance(payload, dict) else payload
        return MessageEnvelope(
            msg_id=str(uuid.uuid4()),
            type=topic,
            timestamp=_iso_timestamp(),
            source=source,
            payload=body,
            trace_id=trace,
            target=target,
        )

    def _copy_handlers(self, topic: str) -> list[Handler]:
        with self._lock:
            sub_ids = list(self._topic_index.get(topic, ()))
            handlers = [self._subscribers[sid][1] for sid in sub_ids if sid in self._subscribers]
        return handlers

    def _get_request_handler(self, topic: str) -> Optional[RequestHandler]:
        with self._lock:
            return self._request_handlers.get(topic)

