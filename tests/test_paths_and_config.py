from __future__ import annotations

import logging
import os

import pytest

from brickbook.utils.app_logging import configure_logging
from brickbook.utils.backup import backup_database_with_rotation
from brickbook.utils.config import CONFIG, load_config
from brickbook.utils.paths import ensure_directories, get_paths


def test_paths_and_dirs(tmp_path):
    paths = get_paths(tmp_path)
    ensure_directories(paths)
    assert paths.data_dir.exists()
    assert paths.backups_dir.exists()
    assert paths.logs_dir.exists()
    assert paths.reports_dir.exists()
    assert paths.db_file.parent == paths.data_dir
    assert (paths.templates_dir / "base.html").exists()


def test_paths_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("BRICKBOOK_HOME", str(tmp_path))
    assert get_paths().root == tmp_path


def test_logging_config_idempotent(tmp_path):
    root = logging.getLogger()
    saved, level = root.handlers[:], root.level
    root.handlers = []
    try:
        logger = configure_logging(get_paths(tmp_path))
        count = len(logger.handlers)
        assert count == 2
        assert configure_logging(get_paths(tmp_path)) is logger
        assert len(logger.handlers) == count
        assert (tmp_path / "logs").exists()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved
        root.setLevel(level)


def test_config_defaults():
    assert CONFIG.app_name
    assert CONFIG.backup_max_copies == 20
    assert CONFIG.session_storage_key == "bricks_permanent_auth"
    assert load_config({}) == CONFIG


def test_config_from_environment():
    cfg = load_config(
        {
            "BRICKBOOK_STORE": "REST",
            "BRICKBOOK_REST_URL": "https://example.supabase.co/",
            "BRICKBOOK_REST_ANON_KEY": "anon",
            "BRICKBOOK_LANGUAGE": "en",
            "BRICKBOOK_BACKUP_MAX_COPIES": "3",
        }
    )
    assert cfg.store_backend == "rest"
    assert cfg.rest_url == "https://example.supabase.co"
    assert cfg.default_language == "en"
    assert cfg.backup_max_copies == 3


def test_unknown_backend():
    with pytest.raises(ValueError):
        load_config({"BRICKBOOK_STORE": "mysql"})


def test_backup_rotation(tmp_path):
    paths = get_paths(tmp_path)
    assert backup_database_with_rotation(paths) == paths.db_file
    ensure_directories(paths)
    paths.db_file.write_bytes(b"sqlite")
    for _ in range(4):
        created = backup_database_with_rotation(paths, max_copies=2)
        assert created.read_bytes() == b"sqlite"
    assert len(list(paths.backups_dir.glob("brickbook_*.db"))) == 2
    assert os.path.exists(paths.db_file)
