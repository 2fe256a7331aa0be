from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict

from content_system import directory as content_directory
from content_system import vocabulary as content_vocabulary
from diagnostics.logging_setup import get_logger
from runtime_bus import topics as BUS_TOPICS

from .errors import AppError, ValidationError, error_reply
from .preferences import OperationResult, PreferenceService
from .profile import ProfileService, ProgressPatch
from .transfer import export_preferences, import_preferences
from .vocab_progress import VocabularyProgressService

logger = get_logger(__name__)

SOURCE = "core_center"

_MISSING = object()


@dataclass(slots=True)
class AppServices:
    preferences: PreferenceService
    profile: ProfileService
    vocab_progress: VocabularyProgressService
    word_field: str = content_vocabulary.DEFAULT_WORD_FIELD
    translations_field: str = content_vocabulary.DEFAULT_TRANSLATIONS_FIELD


def register_core_center_endpoints(bus: Any, services: AppServices) -> None:
    """Register every front-end command as a request handler on ``bus``."""

    if bus is None:
        return
    if getattr(bus, "_core_center_registered", False):
        return
    setattr(bus, "_core_center_registered", True)

    prefs = services.preferences
    profile = services.profile
    fields = (services.word_field, services.translations_field)

    def _command(topic: str, func: Callable[[Dict[str, Any]], Any]) -> None:
        def _handle(envelope) -> Dict[str, object]:
            payload = envelope.payload if isinstance(envelope.payload, dict) else {}
            try:
                outcome = func(payload)
            except (AppError, OSError) as exc:
                logger.warning("command %s failed: %s", topic, exc)
                return error_reply(exc)
            if isinstance(outcome, OperationResult):
                bus.publish_notifications(outcome.events, source=SOURCE, trace_id=envelope.trace_id)
                outcome = outcome.value
            return {"ok": True, "result": to_wire(outcome)}

        bus.register_handler(topic, _handle)

    # Content
    _command(
        BUS_TOPICS.CMD_LIST_DIRECTORY_CONTENTS,
        lambda p: content_directory.list_directory_contents(_arg(p, "directoryPath", "path")),
    )
    _command(
        BUS_TOPICS.CMD_LIST_DIR,
        lambda p: content_directory.list_dir(
            _arg(p, "path", "directoryPath"), shuffle=bool(p.get("shuffle", False))
        ),
    )
    _command(
        BUS_TOPICS.CMD_RANDOM_FILE,
        lambda p: content_directory.random_file(_arg(p, "path", "directoryPath")),
    )
    _command(
        BUS_TOPICS.CMD_EXTRACT_VOCABULARY_FIELDS,
        lambda p: content_vocabulary.extract_vocabulary_fields(_arg(p, "filePath"), *fields),
    )
    _command(
        BUS_TOPICS.CMD_LOAD_VOCABULARY_DECK,
        lambda p: content_vocabulary.load_vocabulary_deck(_arg(p, "directoryPath", "path"), *fields),
    )

    # Profile / progress
    _command(
        BUS_TOPICS.CMD_CREATE_OR_UPDATE_PROFILE,
        lambda p: profile.create_or_update_profile(
            _arg(p, "fullName"), _arg(p, "username"), _arg(p, "email")
        ),
    )
    _command(BUS_TOPICS.CMD_GET_PROFILE_DATA, lambda p: profile.get_profile_data())
    _command(
        BUS_TOPICS.CMD_UPDATE_PROGRESS,
        lambda p: profile.update_progress(ProgressPatch.from_dict(p)),
    )
    _command(BUS_TOPICS.CMD_UPDATE_APP_META, lambda p: profile.update_app_meta())
    _command(BUS_TOPICS.CMD_INCREMENT_STREAK, lambda p: profile.increment_streak())
    _command(BUS_TOPICS.CMD_GET_DAYS_SINCE_CREATION, lambda p: profile.get_days_since_creation())

    # Preferences
    _command(
        BUS_TOPICS.CMD_SAVE_PREFERENCE,
        lambda p: prefs.set(_arg(p, "key"), _arg(p, "value")),
    )
    _command(
        BUS_TOPICS.CMD_SAVE_ALL_PREFERENCES,
        lambda p: prefs.replace_all(_arg(p, "preferences")),
    )
    _command(BUS_TOPICS.CMD_GET_PREFERENCE, lambda p: prefs.get(_arg(p, "key")))
    _command(BUS_TOPICS.CMD_DELETE_PREFERENCE, lambda p: prefs.delete(_arg(p, "key")))
    _command(BUS_TOPICS.CMD_GET_ALL_PREFERENCES, lambda p: prefs.list_all())
    _command(BUS_TOPICS.CMD_CLEAR_ALL_PREFERENCES, lambda p: prefs.clear())
    _command(BUS_TOPICS.CMD_HAS_PREFERENCE, lambda p: prefs.has(_arg(p, "key")))
    _command(
        BUS_TOPICS.CMD_SAVE_VOCABULARY_PROGRESS,
        lambda p: services.vocab_progress.save_vocabulary_progress(
            _arg(p, "currentIndex"), _arg(p, "totalCards"), _arg(p, "directoryPath")
        ),
    )
    _command(
        BUS_TOPICS.CMD_GET_VOCABULARY_PROGRESS,
        lambda p: services.vocab_progress.get_vocabulary_progress(),
    )
    _command(
        BUS_TOPICS.CMD_EXPORT_PREFERENCES,
        lambda p: export_preferences(prefs, _arg(p, "filePath")),
    )
    _command(
        BUS_TOPICS.CMD_IMPORT_PREFERENCES,
        lambda p: import_preferences(prefs, _arg(p, "filePath")),
    )


def publish_startup_events(bus: Any, services: AppServices) -> None:
    """Announce the loaded state once; sticky so late subscribers still get it."""
    bus.publish(
        BUS_TOPICS.USER_DATA_LOADED,
        services.profile.get_profile_data().to_dict(),
        source=SOURCE,
        sticky=True,
    )
    bus.publish(
        BUS_TOPICS.PREFERENCES_LOADED,
        services.preferences.list_all(),
        source=SOURCE,
        sticky=True,
    )


def to_wire(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value


def _arg(payload: Dict[str, Any], name: str, *aliases: str) -> Any:
    for key in (name, *aliases):
        value = payload.get(key, _MISSING)
        if value is not _MISSING:
            return value
    raise ValidationError(f"Missing argument '{name}'")
