from __future__ import annotations

from typing import Dict


class AppError(Exception):
    """Base for failures reported back to the front-end as error replies."""

    code = "app_error"

    def to_reply(self) -> Dict[str, object]:
        return {"ok": False, "error": self.code, "message": str(self)}


class ValidationError(AppError, ValueError):
    code = "validation_error"


class NotFoundError(AppError, LookupError):
    code = "not_found"


class EmptyDirectoryError(NotFoundError):
    code = "empty_directory"


class FormatError(AppError, ValueError):
    code = "format_error"


class ParseError(AppError, ValueError):
    code = "parse_error"


class StorageIOError(AppError, OSError):
    code = "io_error"


_OS_ERROR_CODES = (
    (FileNotFoundError, "not_found"),
    (NotADirectoryError, "not_a_directory"),
    (IsADirectoryError, "is_a_directory"),
    (PermissionError, "permission_denied"),
)


def error_reply(exc: BaseException) -> Dict[str, object]:
    """Map an exception raised by a command to its error reply."""
    if isinstance(exc, AppError):
        return exc.to_reply()
    if isinstance(exc, OSError):
        code = "io_error"
        for kind, name in _OS_ERROR_CODES:
            if isinstance(exc, kind):
                code = name
                break
        return {"ok": False, "error": code, "message": str(exc)}
    return {"ok": False, "error": "handler_error", "message": str(exc)}
