import threading

import pytest

from core_center.errors import NotFoundError, StorageIOError, ValidationError
from core_center.kv_store import MemoryStore
from core_center.preferences import PreferenceService
from runtime_bus import topics


def test_set_then_get(preferences) -> None:
    result = preferences.set("theme", {"mode": "dark"})
    assert preferences.get("theme") == {"mode": "dark"}
    assert preferences.has("theme") is True
    assert [(e.topic, e.payload) for e in result.events] == [
        (topics.PREFERENCE_UPDATED, {"key": "theme", "value": {"mode": "dark"}})
    ]


def test_get_missing_returns_none(preferences) -> None:
    assert preferences.get("nothing") is None
    assert preferences.has("nothing") is False


@pytest.mark.parametrize("key", ["", "   ", None, 3])
def test_invalid_keys_rejected_before_store(preferences, store, key) -> None:
    store.fail = True
    with pytest.raises(ValidationError):
        preferences.set(key, 1)
    assert store.entries() == {}


def test_unserialisable_value_rejected(preferences) -> None:
    with pytest.raises(ValidationError):
        preferences.set("when", object())


@pytest.mark.parametrize("value", [float("nan"), float("inf"), {"nested": [float("-inf")]}])
def test_non_finite_numbers_rejected(preferences, value) -> None:
    with pytest.raises(ValidationError):
        preferences.set("score", value)
    assert preferences.has("score") is False


def test_set_many_is_one_save(preferences, store) -> None:
    result = preferences.set_many({"a": 1, "b": 2})
    assert store.saves == 1
    assert [e.payload for e in result.events] == [{"key": "a", "value": 1}, {"key": "b", "value": 2}]
    store.fail = True
    with pytest.raises(StorageIOError):
        preferences.set_many({"a": 10, "c": 3})
    assert preferences.list_all() == {"a": 1, "b": 2}


def test_delete_emits_event(preferences) -> None:
    preferences.set("volume", 3)
    result = preferences.delete("volume")
    assert preferences.has("volume") is False
    assert result.events[0].topic == topics.PREFERENCE_DELETED
    assert result.events[0].payload == {"key": "volume"}


def test_delete_missing_key(preferences) -> None:
    with pytest.raises(NotFoundError):
        preferences.delete("volume")


def test_clear_emits_null_payload(preferences) -> None:
    preferences.set("a", 1)
    result = preferences.clear()
    assert preferences.list_all() == {}
    assert result.events[0].topic == topics.PREFERENCES_CLEARED
    assert result.events[0].payload is None


def test_replace_all_then_list_is_identity(preferences) -> None:
    preferences.set("stale", True)
    mapping = {"theme": "dark", "volume": 7, "nested": {"a": [1, 2]}, "empty": None}
    result = preferences.replace_all(mapping)
    assert preferences.list_all() == mapping
    assert result.events[0].topic == topics.PREFERENCES_UPDATED
    assert result.events[0].payload == mapping


def test_replace_all_rejects_bad_keys_without_touching_store(preferences) -> None:
    preferences.set("keep", 1)
    with pytest.raises(ValidationError):
        preferences.replace_all({"ok": 1, " ": 2})
    assert preferences.list_all() == {"keep": 1}


def test_replace_all_requires_mapping(preferences) -> None:
    with pytest.raises(ValidationError):
        preferences.replace_all(["not", "a", "map"])


def test_failed_save_rolls_back_and_emits_nothing(preferences, store) -> None:
    preferences.set("theme", "light")
    store.fail = True
    with pytest.raises(StorageIOError):
        preferences.set("theme", "dark")
    with pytest.raises(StorageIOError):
        preferences.clear()
    with pytest.raises(StorageIOError):
        preferences.replace_all({"x": 1})
    assert preferences.list_all() == {"theme": "light"}


def test_list_all_returns_copy(preferences) -> None:
    preferences.set("nested", {"a": 1})
    snapshot = preferences.list_all()
    snapshot["nested"]["a"] = 2
    assert preferences.get("nested") == {"a": 1}


class _StallingStore(MemoryStore):
    """First save waits for ``release`` and then fails."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def save(self) -> None:
        self.calls += 1
        if self.calls == 1:
            self.entered.set()
            self.release.wait(5)
            raise StorageIOError("disk full")


def test_concurrent_writes_do_not_roll_back_each_other() -> None:
    store = _StallingStore()
    preferences = PreferenceService(store)
    errors = []

    def _first() -> None:
        try:
            preferences.set("a", 1)
        except StorageIOError as exc:
            errors.append(exc)

    first = threading.Thread(target=_first)
    first.start()
    assert store.entered.wait(5)
    second = threading.Thread(target=lambda: preferences.set("b", 2))
    second.start()
    second.join(0.1)
    store.release.set()
    first.join(5)
    second.join(5)

    assert len(errors) == 1
    assert preferences.list_all() == {"b": 2}
