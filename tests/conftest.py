from __future__ import annotations

import pytest

from brickbook.db.connection import Database
from brickbook.db.migrations import initialize_database
from brickbook.db.session_storage import SessionStorage
from brickbook.db.sqlite_store import SqliteStore
from brickbook.services.brick_loads_service import BrickLoadsService
from brickbook.services.workers_service import WorkersService


@pytest.fixture
def sent_links():
    return []


@pytest.fixture
def store(tmp_path, sent_links):
    db = Database(tmp_path / "brickbook.db")
    initialize_database(db)
    s = SqliteStore(
        db,
        SessionStorage(tmp_path / "session.json"),
        link_sender=lambda email, token: sent_links.append((email, token)),
    )
    yield s
    db.close()


@pytest.fixture
def workers(store):
    return WorkersService(store)


@pytest.fixture
def loads(store):
    return BrickLoadsService(store)
