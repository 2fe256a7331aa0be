from __future__ import annotations

import platform
import sys

APP_NAME = "vocabdeck"
APP_VERSION = "1.0.0"


def get_app_version() -> str:
    return APP_VERSION


def get_platform_name() -> str:
    name = platform.system().lower()
    if name:
        return name
    return sys.platform or "unknown"

