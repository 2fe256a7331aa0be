from __future__ import annotations

import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from core_center.errors import EmptyDirectoryError
from diagnostics.logging_setup import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """One entry of a directory listing, as sent to the front-end."""

    name: str
    is_directory: bool
    is_file: bool
    full_path: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "is_directory": self.is_directory,
            "is_file": self.is_file,
            "full_path": self.full_path,
        }


def sort_entries(entries: Iterable[DirectoryEntry]) -> List[DirectoryEntry]:
    """Directories first, then case-insensitive by name."""
    return sorted(entries, key=lambda entry: (not entry.is_directory, entry.name.lower()))


def list_directory_contents(path: PathLike) -> List[DirectoryEntry]:
    """List ``path`` sorted directories-first.

    Raises ``FileNotFoundError``, ``NotADirectoryError`` or ``PermissionError``
    when the directory itself cannot be read. Entries whose type cannot be
    determined are left out of the listing.
    """
    return sort_entries(_scan(path))


def list_dir(
    path: PathLike,
    *,
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
) -> List[DirectoryEntry]:
    """Legacy listing: unsorted, optionally shuffled for card drills."""
    entries = list(_scan(path))
    if shuffle:
        (rng or random).shuffle(entries)
    return entries


def random_file(path: PathLike, rng: Optional[random.Random] = None) -> DirectoryEntry:
    files = [entry for entry in _scan(path) if entry.is_file]
    if not files:
        raise EmptyDirectoryError(f"No files found in directory '{path}'")
    return (rng or random).choice(files)


def _scan(path: PathLike) -> Iterable[DirectoryEntry]:
    directory = os.fspath(path)
    with os.scandir(directory) as iterator:
        for item in iterator:
            try:
                is_dir = item.is_dir(follow_symlinks=False)
                is_file = item.is_file(follow_symlinks=False)
            except OSError as exc:
                logger.debug("skipping unreadable entry %s: %s", item.path, exc)
                continue
            yield DirectoryEntry(
                name=item.name,
                is_directory=is_dir,
                is_file=is_file,
                full_path=item.path,
            )
