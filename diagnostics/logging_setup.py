from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

LOGGER_NAME = "vocabdeck"
LOG_FORMAT = "ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"

_CONFIGURED = False
_HANDLER: Optional[logging.Handler] = None


def configure_logging(base_dir: Optional[Path] = None, level: str = "INFO") -> Dict[str, str]:
    """Attach the file handler to the ``vocabdeck`` logger.

    Calling it again is harmless: the handler is installed once per log file,
    only the level is refreshed.
    """
    global _CONFIGURED, _HANDLER
    root = Path(base_dir) if base_dir is not None else Path("data")
    log_dir = root / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "vocabdeck.log"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_resolve_level(level))
    logger.propagate = False

    current = getattr(_HANDLER, "baseFilename", None)
    if not _CONFIGURED or current != os.path.abspath(log_path):
        if _HANDLER is not None:
            logger.removeHandler(_HANDLER)
            _HANDLER.close()
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        _HANDLER = handler
        _CONFIGURED = True

    return {
        "log_path": str(log_path),
        "format": "kv",
        "handlers": "file",
        "logger_name": LOGGER_NAME,
        "level": logging.getLevelName(logger.level),
    }


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(str(level or "INFO").upper())
    return value if isinstance(value, int) else logging.INFO
