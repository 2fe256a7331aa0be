from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from .errors import ValidationError
from .preferences import OperationResult, PreferenceService
from .profile import Clock, utc_now

VOCABULARY_PROGRESS_KEY = "vocabulary_progress"


def _require_count(name: str, value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer")
    return value


class VocabularyProgressService:
    """Where the learner stopped in a folder of cards."""

    def __init__(self, preferences: PreferenceService, clock: Optional[Clock] = None) -> None:
        self.preferences = preferences
        self._clock: Callable = clock or utc_now

    def save_vocabulary_progress(
        self, current_index: int, total_cards: int, directory_path: str
    ) -> OperationResult:
        current_index = _require_count("currentIndex", current_index)
        total_cards = _require_count("totalCards", total_cards)
        if current_index > total_cards:
            raise ValidationError(
                f"currentIndex ({current_index}) cannot exceed totalCards ({total_cards})"
            )
        if not isinstance(directory_path, str) or not directory_path.strip():
            raise ValidationError("directoryPath is required")
        record = {
            "currentIndex": current_index,
            "totalCards": total_cards,
            "directoryPath": directory_path,
            "lastUpdated": self._clock().isoformat(),
        }
        return self.preferences.set(VOCABULARY_PROGRESS_KEY, record)

    def get_vocabulary_progress(self) -> Optional[Dict[str, Any]]:
        return self.preferences.get(VOCABULARY_PROGRESS_KEY)
