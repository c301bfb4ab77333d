from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppPaths:
    """Strongly-typed container for application paths."""

    root: Path
    data_dir: Path
    db_file: Path
    session_file: Path
    backups_dir: Path
    logs_dir: Path
    reports_dir: Path
    templates_dir: Path


def get_paths(base_dir: Path | str | None = None) -> AppPaths:
    """Return primary application filesystem paths.

    Args:
        base_dir: Directory holding data, logs and reports. Defaults to
            ``BRICKBOOK_HOME`` or the current working directory.

    Returns:
        AppPaths: Resolved paths.
    """
    package_dir = Path(__file__).resolve().parents[1]
    if base_dir is None:
        base_dir = os.environ.get("BRICKBOOK_HOME") or Path.cwd()
    root = Path(base_dir)
    data_dir = root / "data"
    return AppPaths(
        root=root,
        data_dir=data_dir,
        db_file=data_dir / "brickbook.db",
        session_file=data_dir / "session.json",
        backups_dir=data_dir / "backups",
        logs_dir=root / "logs",
        reports_dir=root / "reports",
        templates_dir=package_dir / "reports" / "templates",
    )


def ensure_directories(paths: AppPaths) -> None:
    """Ensure required directories exist."""
    for directory in (paths.data_dir, paths.backups_dir, paths.logs_dir, paths.reports_dir):
        directory.mkdir(parents=True, exist_ok=True)
