from datetime import timedelta

import pytest

from core_center.errors import NotFoundError, StorageIOError, ValidationError
from core_center.profile import (
    APP_META_KEY,
    PROFILE_KEY,
    PROGRESS_KEY,
    Progress,
    ProfileService,
    ProgressPatch,
    apply_progress_patch,
)
from runtime_bus import topics


@pytest.fixture()
def service(preferences, clock) -> ProfileService:
    return ProfileService(preferences, clock, app_version="1.0.0", platform_name="linux")


def test_create_profile_stamps_created_at(service, preferences, clock) -> None:
    result = service.create_or_update_profile("Ada Lovelace", "ada", "ada@example.com")
    stored = preferences.get(PROFILE_KEY)
    assert stored == {
        "fullName": "Ada Lovelace",
        "username": "ada",
        "email": "ada@example.com",
        "createdAt": clock().isoformat(),
    }
    assert result.events[0].topic == topics.PREFERENCE_UPDATED


def test_update_preserves_created_at(service, preferences, clock) -> None:
    service.create_or_update_profile("Ada", "ada", "ada@example.com")
    original = preferences.get(PROFILE_KEY)["createdAt"]
    clock.advance(days=5)
    service.create_or_update_profile("Ada L.", "ada", "ada@new.example.com")
    stored = preferences.get(PROFILE_KEY)
    assert stored["createdAt"] == original
    assert stored["fullName"] == "Ada L."


def test_corrupt_profile_gets_fresh_created_at(service, preferences, clock) -> None:
    preferences.set(PROFILE_KEY, {"fullName": "x", "createdAt": "not a date"})
    service.create_or_update_profile("Ada", "ada", "ada@example.com")
    assert preferences.get(PROFILE_KEY)["createdAt"] == clock().isoformat()


@pytest.mark.parametrize(
    "args",
    [("", "ada", "a@b.c"), ("Ada", "  ", "a@b.c"), ("Ada", "ada", ""), ("Ada", None, "a@b.c")],
)
def test_profile_fields_required(service, preferences, args) -> None:
    with pytest.raises(ValidationError):
        service.create_or_update_profile(*args)
    assert preferences.get(PROFILE_KEY) is None


def test_profile_data_defaults(service, clock) -> None:
    data = service.get_profile_data().to_dict()
    assert data == {
        "profile": None,
        "progress": {"currentStreak": 0, "longestStreak": 0, "dailyGoal": 10},
        "appMeta": {"version": "1.0.0", "platform": "linux", "lastOpened": clock().isoformat()},
    }


def test_profile_data_tolerates_corrupt_records(service, preferences) -> None:
    preferences.set(PROGRESS_KEY, "garbage")
    preferences.set(APP_META_KEY, {"version": 3})
    preferences.set(PROFILE_KEY, [1, 2, 3])
    data = service.get_profile_data()
    assert data.profile is None
    assert data.progress == Progress()
    assert data.app_meta.version == "1.0.0"


def test_update_progress_raises_longest_with_current(service) -> None:
    service.update_progress(ProgressPatch(current_streak=4))
    assert service.get_progress() == Progress(4, 4, 10)
    service.update_progress(ProgressPatch(current_streak=2, longest_streak=9, daily_goal=20))
    assert service.get_progress() == Progress(2, 9, 20)


def test_update_progress_clamps_low_longest(service) -> None:
    service.update_progress(ProgressPatch(current_streak=6, longest_streak=1))
    progress = service.get_progress()
    assert progress.longest_streak >= progress.current_streak == 6


@pytest.mark.parametrize(
    "patch",
    [
        ProgressPatch(current_streak=-1),
        ProgressPatch(longest_streak=-3),
        ProgressPatch(daily_goal=0),
        ProgressPatch(current_streak=True),
        ProgressPatch(daily_goal="10"),
    ],
)
def test_invalid_patches(service, patch) -> None:
    with pytest.raises(ValidationError):
        service.update_progress(patch)


def test_longest_never_below_current_across_updates() -> None:
    progress = Progress()
    for patch in [
        ProgressPatch(current_streak=3),
        ProgressPatch(longest_streak=1),
        ProgressPatch(current_streak=10, longest_streak=2),
        ProgressPatch(current_streak=0),
        ProgressPatch(daily_goal=5),
    ]:
        progress = apply_progress_patch(progress, patch)
        assert progress.longest_streak >= progress.current_streak


def test_stored_progress_is_clamped_on_read(service, preferences) -> None:
    preferences.set(PROGRESS_KEY, {"currentStreak": 5, "longestStreak": 2, "dailyGoal": 10})
    assert service.get_progress().longest_streak == 5


def test_increment_streak_refreshes_app_meta(service, preferences, clock) -> None:
    service.update_progress(ProgressPatch(current_streak=2, longest_streak=2))
    clock.advance(hours=1)
    result = service.increment_streak()
    assert service.get_progress() == Progress(3, 3, 10)
    assert preferences.get(APP_META_KEY)["lastOpened"] == clock().isoformat()
    assert [event.payload["key"] for event in result.events] == [PROGRESS_KEY, APP_META_KEY]


def test_increment_streak_saves_once(service, preferences, store) -> None:
    service.update_progress(ProgressPatch(current_streak=2, longest_streak=2))
    store.fail_on_save = store.saves + 2
    result = service.increment_streak()
    assert preferences.get(PROGRESS_KEY)["currentStreak"] == 3
    assert len(result.events) == 2


def test_increment_streak_failure_keeps_both_records(service, preferences, store) -> None:
    service.update_progress(ProgressPatch(current_streak=2, longest_streak=2))
    before = preferences.list_all()
    store.fail = True
    with pytest.raises(StorageIOError):
        service.increment_streak()
    assert preferences.list_all() == before


def test_update_app_meta_regenerates(service, preferences, clock) -> None:
    preferences.set(APP_META_KEY, {"version": "0.1", "platform": "x", "lastOpened": "old", "extra": 1})
    service.update_app_meta()
    assert preferences.get(APP_META_KEY) == {
        "version": "1.0.0",
        "platform": "linux",
        "lastOpened": clock().isoformat(),
    }


def test_days_since_creation(service, clock) -> None:
    service.create_or_update_profile("Ada", "ada", "ada@example.com")
    clock.advance(days=3, hours=23)
    assert service.get_days_since_creation() == 3


def test_days_since_creation_never_negative(service, preferences, clock) -> None:
    future = (clock() + timedelta(days=2)).isoformat()
    preferences.set(
        PROFILE_KEY,
        {"fullName": "Ada", "username": "ada", "email": "a@b.c", "createdAt": future},
    )
    assert service.get_days_since_creation() == 0


def test_days_since_creation_without_profile(service) -> None:
    with pytest.raises(NotFoundError):
        service.get_days_since_creation()
