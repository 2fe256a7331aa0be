from __future__ import annotations

import json
from pathlib import Path
from typing import Union

from diagnostics.fs_ops import write_json_atomic
from diagnostics.logging_setup import get_logger

from .errors import ParseError, StorageIOError
from .preferences import OperationResult, PreferenceService

logger = get_logger(__name__)

PathLike = Union[str, Path]


def export_preferences(preferences: PreferenceService, path: PathLike) -> OperationResult:
    target = Path(path)
    data = preferences.list_all()
    try:
        write_json_atomic(target, data, sort_keys=True)
    except OSError as exc:
        raise StorageIOError(f"Failed to export preferences to '{target}': {exc}") from exc
    logger.info("preferences exported path=%s keys=%d", target, len(data))
    return OperationResult()


def import_preferences(preferences: PreferenceService, path: PathLike) -> OperationResult:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Preferences file '{source}' is not valid UTF-8") from exc
    except OSError as exc:
        raise StorageIOError(f"Failed to read preferences from '{source}': {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid preferences file '{source}': {exc.msg}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"Invalid preferences file '{source}': expected a JSON object")
    result = preferences.replace_all(data)
    logger.info("preferences imported path=%s keys=%d", source, len(data))
    return result
