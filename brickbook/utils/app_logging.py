from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from brickbook.utils.paths import AppPaths


def configure_logging(paths: AppPaths, level: int | str = logging.INFO) -> logging.Logger:
    """Configure application logging to console and file.

    Args:
        paths: Application paths; the log goes to ``logs_dir/app.log``.
        level: Logging level.

    Returns:
        Logger: Root logger configured.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return logger  # Already configured

    paths.logs_dir.mkdir(parents=True, exist_ok=True)
    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(
        paths.logs_dir / "app.log", maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logging.getLogger("PIL").setLevel(logging.WARNING)

    return logger
