from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path

from brickbook.utils.paths import AppPaths

logger = logging.getLogger(__name__)


def backup_database_with_rotation(paths: AppPaths, max_copies: int = 20) -> Path:
    """Create timestamped backup of the local database and rotate old copies.

    Args:
        paths: Application paths.
        max_copies: Maximum number of backups to retain.

    Returns:
        Path: Backup file path created.
    """
    db_path = paths.db_file
    if not db_path.exists():
        return db_path  # Nothing to back up yet

    paths.backups_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = paths.backups_dir / f"brickbook_{timestamp}.db"
    shutil.copy2(db_path, backup_path)

    backups = sorted(paths.backups_dir.glob("brickbook_*.db"), reverse=True)
    for old in backups[max_copies:]:
        try:
            old.unlink()
        except OSError as exc:
            logger.warning("Could not remove old backup %s: %s", old, exc)
    return backup_path
