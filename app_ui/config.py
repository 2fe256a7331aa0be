# =============================================================================
# NAV INDEX (search these tags)
# [NAV-00] Imports / constants
# [NAV-10] Config loading (defaults/roaming/env)
# [NAV-20] Public getters
# [NAV-99] End
# =============================================================================

# === [NAV-00] Imports / constants ============================================
from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Dict, Optional

from core_center.discovery import data_roots

CONFIG_FILENAME = "app_config.json"
LOG_LEVEL_ENV = "VOCABDECK_LOG_LEVEL"
_DEFAULT_APP_CONFIG: Dict[str, object] = {
    "log_level": "INFO",
    "store_filename": "preferences.json",
    "frontmatter": {
        "word_field": "Italian",
        "translations_field": "English",
    },
}


# === [NAV-10] Config loading (defaults/roaming/env) ==========================
def config_path(base_dir: Optional[Path] = None) -> Path:
    return data_roots(base_dir)["roaming"] / CONFIG_FILENAME


def load_app_config(base_dir: Optional[Path] = None) -> Dict:
    path = config_path(base_dir)
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(_DEFAULT_APP_CONFIG, indent=2), encoding="utf-8")
        data = copy.deepcopy(_DEFAULT_APP_CONFIG)
    else:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            data = {}
        if not isinstance(data, dict):
            data = {}
        data = _merge_defaults(data, _DEFAULT_APP_CONFIG)
    env_level = os.environ.get(LOG_LEVEL_ENV, "").strip()
    if env_level:
        data["log_level"] = env_level.upper()
    return data


def _merge_defaults(data: Dict, defaults: Dict) -> Dict:
    merged = dict(data)
    for key, value in defaults.items():
        if isinstance(value, dict):
            current = merged.get(key)
            merged[key] = _merge_defaults(current if isinstance(current, dict) else {}, value)
        else:
            merged.setdefault(key, value)
    return merged


# === [NAV-20] Public getters ==================================================
def get_store_path(config: Dict, base_dir: Optional[Path] = None) -> Path:
    filename = str(config.get("store_filename") or _DEFAULT_APP_CONFIG["store_filename"])
    return data_roots(base_dir)["roaming"] / filename


def get_frontmatter_fields(config: Dict) -> tuple[str, str]:
    section = config.get("frontmatter")
    defaults = _DEFAULT_APP_CONFIG["frontmatter"]
    if not isinstance(section, dict):
        section = {}
    word = section.get("word_field")
    translations = section.get("translations_field")
    return (
        word if isinstance(word, str) and word.strip() else defaults["word_field"],
        translations if isinstance(translations, str) and translations.strip() else defaults["translations_field"],
    )


# === [NAV-99] End =============================================================
__all__ = [
    "CONFIG_FILENAME",
    "LOG_LEVEL_ENV",
    "config_path",
    "load_app_config",
    "get_store_path",
    "get_frontmatter_fields",
]
