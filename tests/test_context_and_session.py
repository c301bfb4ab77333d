from __future__ import annotations

from brickbook.context import build_context, build_store
from brickbook.db.models import Session, User
from brickbook.db.rest_store import RestStore
from brickbook.db.session_storage import SessionStorage
from brickbook.db.sqlite_store import SqliteStore
from brickbook.utils.config import load_config
from brickbook.utils.paths import ensure_directories, get_paths


def test_session_storage_round_trip(tmp_path):
    storage = SessionStorage(tmp_path / "s.json")
    assert storage.load() is None
    session = Session(access_token="tok", user=User("u1", "a@b.c", "admin"), refresh_token="r", expires_at=10.0)
    storage.save(session)
    assert storage.load() == session
    storage.clear()
    assert storage.load() is None


def test_session_storage_keeps_other_keys(tmp_path):
    path = tmp_path / "s.json"
    SessionStorage(path, key="other").save(Session(access_token="x", user=User("u2", "x@y.z")))
    storage = SessionStorage(path)
    storage.save(Session(access_token="tok", user=User("u1", "a@b.c")))
    storage.clear()
    assert SessionStorage(path, key="other").load().access_token == "x"


def test_malformed_session_is_ignored(tmp_path):
    path = tmp_path / "s.json"
    path.write_text("{not json", encoding="utf-8")
    assert SessionStorage(path).load() is None
    path.write_text('{"bricks_permanent_auth": {"user": {}}}', encoding="utf-8")
    assert SessionStorage(path).load() is None


def test_build_local_context(tmp_path):
    paths = get_paths(tmp_path)
    ensure_directories(paths)
    ctx = build_context(load_config({"BRICKBOOK_LANGUAGE": "en"}), paths)
    try:
        assert isinstance(ctx.store, SqliteStore)
        assert paths.db_file.exists()
        assert ctx.translator.language == "en"
        assert ctx.auth.needs_setup()
        worker = ctx.workers.create_worker("Ramu", "1")
        assert ctx.workers.get_worker(worker.id).name == "Ramu"
    finally:
        ctx.store.db.close()


def test_build_rest_store(tmp_path):
    cfg = load_config({"BRICKBOOK_STORE": "rest", "BRICKBOOK_REST_URL": "https://example.supabase.co"})
    store = build_store(cfg, get_paths(tmp_path))
    assert isinstance(store, RestStore)
    assert store.session_storage.path == tmp_path / "data" / "session.json"
