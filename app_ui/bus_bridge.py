from __future__ import annotations

from typing import Callable, Optional

from PyQt6 import QtCore

from runtime_bus import topics as BUS_TOPICS


class PreferenceEventBridge(QtCore.QObject):
    """Re-emits preference notifications from the runtime bus as Qt signals."""

    preference_updated = QtCore.pyqtSignal(str, object)
    preference_deleted = QtCore.pyqtSignal(str)
    preferences_updated = QtCore.pyqtSignal(dict)
    preferences_cleared = QtCore.pyqtSignal()
    user_data_loaded = QtCore.pyqtSignal(object)
    preferences_loaded = QtCore.pyqtSignal(dict)

    def __init__(self, bus, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._bus = bus
        self._subscriptions: list[str] = []
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    def start(self) -> None:
        if not self._bus or self._connected:
            return
        self._connected = True
        handlers = {
            BUS_TOPICS.PREFERENCE_UPDATED: self._on_preference_updated,
            BUS_TOPICS.PREFERENCE_DELETED: self._on_preference_deleted,
            BUS_TOPICS.PREFERENCES_UPDATED: self._on_preferences_updated,
            BUS_TOPICS.PREFERENCES_CLEARED: self._on_preferences_cleared,
            BUS_TOPICS.USER_DATA_LOADED: self._on_user_data_loaded,
            BUS_TOPICS.PREFERENCES_LOADED: self._on_preferences_loaded,
        }
        for topic, handler in handlers.items():
            self._subscribe(topic, handler, replay_last=topic in BUS_TOPICS.STARTUP_TOPICS)

    def stop(self) -> None:
        if not self._bus:
            return
        for sub_id in list(self._subscriptions):
            self._bus.unsubscribe(sub_id)
        self._subscriptions.clear()
        self._connected = False

    def _subscribe(self, topic: str, handler: Callable, *, replay_last: bool = False) -> None:
        sub_id = self._bus.subscribe(topic, handler, replay_last=replay_last)
        self._subscriptions.append(sub_id)

    def _on_preference_updated(self, envelope) -> None:
        payload = _payload(envelope)
        self.preference_updated.emit(str(payload.get("key", "")), payload.get("value"))

    def _on_preference_deleted(self, envelope) -> None:
        self.preference_deleted.emit(str(_payload(envelope).get("key", "")))

    def _on_preferences_updated(self, envelope) -> None:
        self.preferences_updated.emit(_payload(envelope))

    def _on_preferences_cleared(self, envelope) -> None:  # noqa: ARG002
        self.preferences_cleared.emit()

    def _on_user_data_loaded(self, envelope) -> None:
        self.user_data_loaded.emit(getattr(envelope, "payload", None))

    def _on_preferences_loaded(self, envelope) -> None:
        self.preferences_loaded.emit(_payload(envelope))


def _payload(envelope) -> dict:
    payload = getattr(envelope, "payload", None) or {}
    return payload if isinstance(payload, dict) else {}
