from __future__ import annotations

import sys

from brickbook.context import build_context
from brickbook.utils.app_logging import configure_logging
from brickbook.utils.backup import backup_database_with_rotation
from brickbook.utils.config import load_config
from brickbook.utils.paths import ensure_directories, get_paths


def main() -> int:
    """Application entry point.

    Returns:
        int: Exit code.
    """
    paths = get_paths()
    ensure_directories(paths)
    logger = configure_logging(paths)
    config = load_config()
    logger.info("Application starting (%s store)", config.store_backend)

    if config.store_backend == "sqlite":
        backup_database_with_rotation(paths, max_copies=config.backup_max_copies)
    context = build_context(config, paths)

    # Lazy import GUI to keep CLI startup fast and avoid coverage counting
    from brickbook.gui.app import run_app

    try:
        run_app(context)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unhandled exception in GUI: %s", exc)
        return 1

    logger.info("Application shutdown")
    return 0


if __name__ == "__main__":
    sys.exit(main())
