from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

DATA_DIR_ENV = "VOCABDECK_DATA_DIR"
DEFAULT_DATA_DIR = Path("data")


def data_root(base_dir: Optional[Path] = None) -> Path:
    if base_dir is not None:
        return Path(base_dir)
    override = os.environ.get(DATA_DIR_ENV, "").strip()
    return Path(override) if override else DEFAULT_DATA_DIR


def data_roots(base_dir: Optional[Path] = None) -> Dict[str, Path]:
    root = data_root(base_dir)
    return {
        "root": root,
        "roaming": root / "roaming",
        "logs": root / "logs",
        "exports": root / "exports",
    }


def ensure_data_roots(base_dir: Optional[Path] = None) -> Dict[str, Path]:
    roots = data_roots(base_dir)
    for path in roots.values():
        path.mkdir(parents=True, exist_ok=True)
    return roots
