from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core_center.errors import StorageIOError  # noqa: E402
from core_center.kv_store import MemoryStore  # noqa: E402
from core_center.preferences import PreferenceService  # noqa: E402


class FailingStore(MemoryStore):
    """Memory store whose ``save`` can be switched to fail, always or on the n-th call."""

    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.fail = False
        self.fail_on_save = None
        self.saves = 0

    def save(self) -> None:
        self.saves += 1
        if self.fail or self.saves == self.fail_on_save:
            raise StorageIOError("disk full")


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.value = start

    def __call__(self) -> datetime:
        return self.value

    def advance(self, **kwargs) -> None:
        self.value = self.value + timedelta(**kwargs)


@pytest.fixture()
def store() -> FailingStore:
    return FailingStore()


@pytest.fixture()
def preferences(store) -> PreferenceService:
    return PreferenceService(store)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc))
