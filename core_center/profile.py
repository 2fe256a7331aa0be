"""Profile, streak progress and app metadata on top of the preference store.

Each record lives under its own preference key. Reads are forgiving: a
missing or corrupt record is replaced by defaults rather than failing the
call. Writes validate their input first.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from diagnostics.logging_setup import get_logger

from .errors import NotFoundError, ValidationError
from .preferences import OperationResult, PreferenceService

logger = get_logger(__name__)

PROFILE_KEY = "user_profile"
PROGRESS_KEY = "user_progress"
APP_META_KEY = "app_meta"

DEFAULT_APP_VERSION = "1.0.0"
DEFAULT_DAILY_GOAL = 10

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: object) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        stamp = datetime.fromisoformat(text)
    except ValueError:
        return None
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


@dataclass(frozen=True, slots=True)
class Profile:
    full_name: str
    username: str
    email: str
    created_at: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "fullName": self.full_name,
            "username": self.username,
            "email": self.email,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: object) -> Optional["Profile"]:
        if not isinstance(data, dict):
            return None
        fields = [data.get(name) for name in ("fullName", "username", "email", "createdAt")]
        if not all(isinstance(value, str) for value in fields):
            return None
        if parse_timestamp(fields[3]) is None:
            return None
        return cls(*fields)


@dataclass(frozen=True, slots=True)
class Progress:
    current_streak: int = 0
    longest_streak: int = 0
    daily_goal: int = DEFAULT_DAILY_GOAL

    def to_dict(self) -> Dict[str, object]:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "dailyGoal": self.daily_goal,
        }

    @classmethod
    def from_dict(cls, data: object) -> Optional["Progress"]:
        if not isinstance(data, dict):
            return None
        values = [data.get(name) for name in ("currentStreak", "longestStreak", "dailyGoal")]
        if not all(_is_count(value) for value in values):
            return None
        current, longest, goal = values
        return cls(current, max(longest, current), goal)


@dataclass(frozen=True, slots=True)
class ProgressPatch:
    """Partial progress update; ``None`` leaves the stored field as is."""

    current_streak: Optional[int] = None
    longest_streak: Optional[int] = None
    daily_goal: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "ProgressPatch":
        return cls(
            current_streak=data.get("current", data.get("currentStreak")),
            longest_streak=data.get("longest", data.get("longestStreak")),
            daily_goal=data.get("goal", data.get("dailyGoal")),
        )


@dataclass(frozen=True, slots=True)
class AppMeta:
    version: str
    platform: str
    last_opened: str

    def to_dict(self) -> Dict[str, object]:
        return {"version": self.version, "platform": self.platform, "lastOpened": self.last_opened}

    @classmethod
    def from_dict(cls, data: object) -> Optional["AppMeta"]:
        if not isinstance(data, dict):
            return None
        values = [data.get(name) for name in ("version", "platform", "lastOpened")]
        if not all(isinstance(value, str) for value in values):
            return None
        return cls(*values)


@dataclass(frozen=True, slots=True)
class ProfileData:
    profile: Optional[Profile]
    progress: Progress
    app_meta: AppMeta

    def to_dict(self) -> Dict[str, object]:
        return {
            "profile": self.profile.to_dict() if self.profile else None,
            "progress": self.progress.to_dict(),
            "appMeta": self.app_meta.to_dict(),
        }


def apply_progress_patch(progress: Progress, patch: ProgressPatch) -> Progress:
    for name in ("current_streak", "longest_streak"):
        value = getattr(patch, name)
        if value is not None and not _is_count(value):
            raise ValidationError(f"{name} must be a non-negative integer")
    goal = patch.daily_goal
    if goal is not None and (not _is_count(goal) or goal < 1):
        raise ValidationError("daily_goal must be a positive integer")

    current = progress.current_streak if patch.current_streak is None else patch.current_streak
    longest = progress.longest_streak if patch.longest_streak is None else patch.longest_streak
    return Progress(
        current_streak=current,
        longest_streak=max(longest, current),
        daily_goal=progress.daily_goal if goal is None else goal,
    )


class ProfileService:
    def __init__(
        self,
        preferences: PreferenceService,
        clock: Optional[Clock] = None,
        *,
        app_version: str = DEFAULT_APP_VERSION,
        platform_name: str = "unknown",
    ) -> None:
        self.preferences = preferences
        self._clock = clock or utc_now
        self.app_version = app_version
        self.platform_name = platform_name

    def create_or_update_profile(self, full_name: str, username: str, email: str) -> OperationResult:
        values = {"full_name": full_name, "username": username, "email": email}
        for name, value in values.items():
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{name} is required")
        with self.preferences.lock:
            existing = self._load_profile()
            created_at = existing.created_at if existing else self._now_iso()
            profile = Profile(full_name.strip(), username.strip(), email.strip(), created_at)
            result = self.preferences.set(PROFILE_KEY, profile.to_dict())
        logger.info("profile saved username=%s new=%s", profile.username, existing is None)
        return result

    def get_progress(self) -> Progress:
        return Progress.from_dict(self.preferences.get(PROGRESS_KEY)) or Progress()

    def get_profile_data(self) -> ProfileData:
        app_meta = AppMeta.from_dict(self.preferences.get(APP_META_KEY)) or self._fresh_app_meta()
        return ProfileData(
            profile=self._load_profile(),
            progress=self.get_progress(),
            app_meta=app_meta,
        )

    def update_progress(self, patch: ProgressPatch) -> OperationResult:
        with self.preferences.lock:
            progress = apply_progress_patch(self.get_progress(), patch)
            return self.preferences.set(PROGRESS_KEY, progress.to_dict())

    def update_app_meta(self) -> OperationResult:
        return self.preferences.set(APP_META_KEY, self._fresh_app_meta().to_dict())

    def increment_streak(self) -> OperationResult:
        """Bump the current streak and refresh app metadata in a single save."""
        with self.preferences.lock:
            progress = self.get_progress()
            progress = apply_progress_patch(
                progress, ProgressPatch(current_streak=progress.current_streak + 1)
            )
            return self.preferences.set_many(
                {PROGRESS_KEY: progress.to_dict(), APP_META_KEY: self._fresh_app_meta().to_dict()}
            )

    def get_days_since_creation(self) -> int:
        profile = self._load_profile()
        if profile is None:
            raise NotFoundError("No user profile found")
        created = parse_timestamp(profile.created_at)
        return max(0, (self._clock() - created).days)

    def _load_profile(self) -> Optional[Profile]:
        return Profile.from_dict(self.preferences.get(PROFILE_KEY))

    def _fresh_app_meta(self) -> AppMeta:
        return AppMeta(self.app_version, self.platform_name, self._now_iso())

    def _now_iso(self) -> str:
        return self._clock().isoformat()


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
