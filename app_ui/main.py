# =============================================================================
# NAV INDEX (search these tags)
# [NAV-00] Imports / constants
# [NAV-10] Store initialisation
# [NAV-20] Bootstrap (bus + services + endpoints)
# [NAV-99] main() entrypoint
# =============================================================================

# === [NAV-00] Imports / constants ============================================
# region NAV-00 Imports / constants
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from core_center.bus_endpoints import (
    AppServices,
    publish_startup_events,
    register_core_center_endpoints,
)
from core_center.discovery import data_root, ensure_data_roots
from core_center.errors import StorageIOError
from core_center.kv_store import JsonFileStore, KeyValueStore, MemoryStore
from core_center.preferences import PreferenceService
from core_center.profile import ProfileService
from core_center.vocab_progress import VocabularyProgressService
from diagnostics.logging_setup import configure_logging, get_logger
from runtime_bus.bus import RuntimeBus

from . import config as app_config
from .versioning import APP_NAME, get_app_version, get_platform_name

logger = get_logger(__name__)
SOURCE = "app_ui"
# endregion


@dataclass(slots=True)
class AppContext:
    bus: RuntimeBus
    store: KeyValueStore
    services: AppServices
    config: Dict
    data_dir: Path
    store_fallback: bool = False


# === [NAV-10] Store initialisation ===========================================
# region NAV-10 Store initialisation
def open_store(path: Path) -> tuple[KeyValueStore, bool]:
    """Open the on-disk store; on failure keep the app usable in memory."""
    try:
        return JsonFileStore(path), False
    except StorageIOError:
        logger.exception("store initialisation failed for %s; using in-memory store", path)
        return MemoryStore(), True
# endregion


# === [NAV-20] Bootstrap ======================================================
# region NAV-20 Bootstrap
def bootstrap(
    data_dir: Optional[Path] = None,
    bus: Optional[RuntimeBus] = None,
    *,
    clock=None,
) -> AppContext:
    root = data_root(data_dir)
    ensure_data_roots(root)
    config = app_config.load_app_config(root)
    configure_logging(root, level=str(config.get("log_level", "INFO")))

    store, fallback = open_store(app_config.get_store_path(config, root))
    preferences = PreferenceService(store)
    word_field, translations_field = app_config.get_frontmatter_fields(config)
    services = AppServices(
        preferences=preferences,
        profile=ProfileService(
            preferences,
            clock,
            app_version=get_app_version(),
            platform_name=get_platform_name(),
        ),
        vocab_progress=VocabularyProgressService(preferences, clock),
        word_field=word_field,
        translations_field=translations_field,
    )

    bus = bus or RuntimeBus()
    register_core_center_endpoints(bus, services)
    publish_startup_events(bus, services)
    logger.info("backend ready data_dir=%s store_fallback=%s", root, fallback)
    return AppContext(
        bus=bus,
        store=store,
        services=services,
        config=config,
        data_dir=root,
        store_fallback=fallback,
    )
# endregion


# === [NAV-99] main() entrypoint =============================================
# region NAV-99 main()
def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Invoke vocabdeck backend commands over the runtime bus.",
    )
    parser.add_argument("--data-dir", type=Path, default=None, help="Data root (default: ./data)")
    sub = parser.add_subparsers(dest="action", required=True)
    invoke = sub.add_parser("invoke", help="Run one command and print its JSON reply")
    invoke.add_argument("command")
    invoke.add_argument("payload", nargs="?", default="{}", help="JSON object with the arguments")
    sub.add_parser("commands", help="List registered commands")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    context = bootstrap(args.data_dir)

    if args.action == "commands":
        for topic in context.bus.request_topics():
            print(topic)
        return 0

    try:
        payload = json.loads(args.payload)
    except json.JSONDecodeError as exc:
        print(f"invalid payload JSON: {exc.msg}", file=sys.stderr)
        return 2
    if not isinstance(payload, dict):
        print("payload must be a JSON object", file=sys.stderr)
        return 2

    reply = context.bus.request(args.command, payload, source=SOURCE)
    print(json.dumps(reply, indent=2, ensure_ascii=False))
    return 0 if reply.get("ok") else 1


if __name__ == "__main__":
    sys.exit(main())
# endregion
