"""Topic constants for the runtime bus."""

# Preference notifications (front-end facing event names)
PREFERENCE_UPDATED = "preference-updated"
PREFERENCE_DELETED = "preference-deleted"
PREFERENCES_UPDATED = "preferences-updated"
PREFERENCES_CLEARED = "preferences-cleared"

# Startup notifications, published sticky
USER_DATA_LOADED = "user-data-loaded"
PREFERENCES_LOADED = "preferences-loaded"

# Content commands
CMD_LIST_DIRECTORY_CONTENTS = "list_directory_contents"
CMD_EXTRACT_VOCABULARY_FIELDS = "extract_vocabulary_fields"
CMD_LIST_DIR = "list_dir"
CMD_RANDOM_FILE = "random_file"
CMD_LOAD_VOCABULARY_DECK = "load_vocabulary_deck"

# Profile commands
CMD_CREATE_OR_UPDATE_PROFILE = "create_or_update_profile"
CMD_GET_PROFILE_DATA = "get_profile_data"
CMD_UPDATE_PROGRESS = "update_progress"
CMD_UPDATE_APP_META = "update_app_meta"
CMD_INCREMENT_STREAK = "increment_streak"
CMD_GET_DAYS_SINCE_CREATION = "get_days_since_creation"

# Preference commands
CMD_SAVE_PREFERENCE = "save_preference"
CMD_SAVE_ALL_PREFERENCES = "save_all_preferences"
CMD_GET_PREFERENCE = "get_preference"
CMD_DELETE_PREFERENCE = "delete_preference"
CMD_GET_ALL_PREFERENCES = "get_all_preferences"
CMD_CLEAR_ALL_PREFERENCES = "clear_all_preferences"
CMD_HAS_PREFERENCE = "has_preference"
CMD_SAVE_VOCABULARY_PROGRESS = "save_vocabulary_progress"
CMD_GET_VOCABULARY_PROGRESS = "get_vocabulary_progress"
CMD_EXPORT_PREFERENCES = "export_preferences"
CMD_IMPORT_PREFERENCES = "import_preferences"

NOTIFICATION_TOPICS = (
    PREFERENCE_UPDATED,
    PREFERENCE_DELETED,
    PREFERENCES_UPDATED,
    PREFERENCES_CLEARED,
    USER_DATA_LOADED,
    PREFERENCES_LOADED,
)

STARTUP_TOPICS = (USER_DATA_LOADED, PREFERENCES_LOADED)

__all__ = [
    "PREFERENCE_UPDATED",
    "PREFERENCE_DELETED",
    "PREFERENCES_UPDATED",
    "PREFERENCES_CLEARED",
    "USER_DATA_LOADED",
    "PREFERENCES_LOADED",
    "CMD_LIST_DIRECTORY_CONTENTS",
    "CMD_EXTRACT_VOCABULARY_FIELDS",
    "CMD_LIST_DIR",
    "CMD_RANDOM_FILE",
    "CMD_LOAD_VOCABULARY_DECK",
    "CMD_CREATE_OR_UPDATE_PROFILE",
    "CMD_GET_PROFILE_DATA",
    "CMD_UPDATE_PROGRESS",
    "CMD_UPDATE_APP_META",
    "CMD_INCREMENT_STREAK",
    "CMD_GET_DAYS_SINCE_CREATION",
    "CMD_SAVE_PREFERENCE",
    "CMD_SAVE_ALL_PREFERENCES",
    "CMD_GET_PREFERENCE",
    "CMD_DELETE_PREFERENCE",
    "CMD_GET_ALL_PREFERENCES",
    "CMD_CLEAR_ALL_PREFERENCES",
    "CMD_HAS_PREFERENCE",
    "CMD_SAVE_VOCABULARY_PROGRESS",
    "CMD_GET_VOCABULARY_PROGRESS",
    "CMD_EXPORT_PREFERENCES",
    "CMD_IMPORT_PREFERENCES",
    "NOTIFICATION_TOPICS",
    "STARTUP_TOPICS",
]
