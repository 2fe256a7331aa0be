from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from diagnostics.logging_setup import get_logger
from runtime_bus import topics
from runtime_bus.messages import Notification

from .errors import NotFoundError, StorageIOError, ValidationError
from .kv_store import KeyValueStore

logger = get_logger(__name__)


@dataclass(slots=True)
class OperationResult:
    """What a command returns plus the notifications to publish for it."""

    value: Any = None
    events: List[Notification] = field(default_factory=list)


def validate_key(key: object) -> str:
    if not isinstance(key, str):
        raise ValidationError("Preference key must be a string")
    if not key.strip():
        raise ValidationError("Preference key must not be empty")
    return key


def _validate_value(key: str, value: Any) -> None:
    try:
        json.dumps(value, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Value for '{key}' is not JSON serialisable: {exc}") from exc


class PreferenceService:
    """Facade over a ``KeyValueStore``.

    Every mutation is validated, applied and saved under ``lock``; if the save
    fails the in-memory state goes back to what it was before the call.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.lock = threading.RLock()

    def get(self, key: str) -> Any:
        return self.store.get(validate_key(key))

    def has(self, key: str) -> bool:
        return self.store.has(validate_key(key))

    def list_all(self) -> Dict[str, Any]:
        return self.store.entries()

    def set(self, key: str, value: Any) -> OperationResult:
        return self.set_many({key: value})

    def set_many(self, items: Mapping[str, Any]) -> OperationResult:
        items = dict(items)
        for key, value in items.items():
            _validate_value(validate_key(key), value)

        def _apply() -> None:
            for key, value in items.items():
                self.store.set(key, value)

        self._commit(_apply)
        logger.info("preference saved keys=%s", ",".join(items))
        return OperationResult(
            events=[
                Notification(topics.PREFERENCE_UPDATED, {"key": key, "value": value})
                for key, value in items.items()
            ]
        )

    def delete(self, key: str) -> OperationResult:
        key = validate_key(key)
        with self.lock:
            if not self.store.has(key):
                raise NotFoundError(f"Preference '{key}' not found")
            self._commit(lambda: self.store.delete(key))
        logger.info("preference deleted key=%s", key)
        return OperationResult(events=[Notification(topics.PREFERENCE_DELETED, {"key": key})])

    def clear(self) -> OperationResult:
        self._commit(self.store.clear)
        logger.info("preferences cleared")
        return OperationResult(events=[Notification(topics.PREFERENCES_CLEARED, None)])

    def replace_all(self, mapping: Mapping[str, Any]) -> OperationResult:
        if not isinstance(mapping, Mapping):
            raise ValidationError("Preferences must be a mapping of key to value")
        items = dict(mapping)
        for key, value in items.items():
            _validate_value(validate_key(key), value)

        def _apply() -> None:
            self.store.clear()
            for key, value in items.items():
                self.store.set(key, value)

        with self.lock:
            self._commit(_apply)
            entries = self.store.entries()
        logger.info("preferences replaced keys=%d", len(items))
        return OperationResult(events=[Notification(topics.PREFERENCES_UPDATED, entries)])

    def _commit(self, mutate) -> None:
        with self.lock:
            snapshot = self.store.entries()
            mutate()
            try:
                self.store.save()
            except StorageIOError:
                self._restore(snapshot)
                logger.error("preference store save failed; changes rolled back")
                raise

    def _restore(self, snapshot: Dict[str, Any]) -> None:
        self.store.clear()
        for key, value in snapshot.items():
            self.store.set(key, value)
