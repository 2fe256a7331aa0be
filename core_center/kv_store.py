"""Key-value store collaborators behind the preference facade.

``JsonFileStore`` keeps the whole mapping in one JSON document on disk;
``MemoryStore`` keeps it in memory only. Both satisfy ``KeyValueStore``.
Mutations stay in memory until ``save()`` is called.
"""

from __future__ import annotations

import copy
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from diagnostics.fs_ops import write_json_atomic
from diagnostics.logging_setup import get_logger

from .errors import StorageIOError

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> bool: ...

    def entries(self) -> Dict[str, Any]: ...

    def clear(self) -> None: ...

    def has(self, key: str) -> bool: ...

    def save(self) -> None: ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._lock = threading.RLock()
        self._data: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def get(self, key: str) -> Any:
        with self._lock:
            return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, _MISSING) is not _MISSING

    def entries(self) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def save(self) -> None:
        return None


class JsonFileStore(MemoryStore):
    """Mapping persisted as a single JSON object at ``path``."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._data = self._load()

    def save(self) -> None:
        with self._lock:
            snapshot = copy.deepcopy(self._data)
        try:
            write_json_atomic(self.path, snapshot)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageIOError(f"Failed to persist store '{self.path}': {exc}") from exc

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StorageIOError(f"Failed to read store '{self.path}': {exc}") from exc
        except json.JSONDecodeError as exc:
            raise StorageIOError(f"Store '{self.path}' is not valid JSON: {exc.msg}") from exc
        if not isinstance(data, dict):
            raise StorageIOError(f"Store '{self.path}' does not hold a JSON object")
        logger.info("loaded store %s keys=%d", self.path, len(data))
        return data


_MISSING = object()
