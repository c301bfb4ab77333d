from __future__ import annotations

import logging
from dataclasses import dataclass, field

from brickbook.db.connection import Database
from brickbook.db.gateway import RecordStore
from brickbook.db.migrations import initialize_database
from brickbook.db.rest_store import RestConfig, RestStore
from brickbook.db.session_storage import SessionStorage
from brickbook.db.sqlite_store import SqliteStore
from brickbook.services.auth_service import AuthService
from brickbook.services.brick_loads_service import BrickLoadsService
from brickbook.services.workers_service import WorkersService
from brickbook.utils.config import AppConfig
from brickbook.utils.i18n import Translator
from brickbook.utils.paths import AppPaths

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything the views need, built once at start-up and passed down."""

    config: AppConfig
    paths: AppPaths
    store: RecordStore
    translator: Translator
    workers: WorkersService = field(init=False)
    brick_loads: BrickLoadsService = field(init=False)
    auth: AuthService = field(init=False)

    def __post_init__(self) -> None:
        self.workers = WorkersService(self.store)
        self.brick_loads = BrickLoadsService(
            self.store,
            business_name=self.config.business_name,
            country_code=self.config.whatsapp_country_code,
        )
        self.auth = AuthService(self.store)


def build_store(config: AppConfig, paths: AppPaths) -> RecordStore:
    """Open the configured backend."""
    session_storage = SessionStorage(paths.session_file, key=config.session_storage_key)
    if config.store_backend == "rest":
        logger.info("Using hosted store at %s", config.rest_url)
        return RestStore(
            RestConfig(config.rest_url, config.rest_anon_key, config.http_timeout_seconds),
            session_storage,
        )
    db = Database(paths.db_file, timeout_seconds=config.db_timeout_seconds)
    initialize_database(db)
    logger.info("Using local store %s", paths.db_file)
    return SqliteStore(db, session_storage, link_ttl_seconds=config.login_link_ttl_minutes * 60)


def build_context(config: AppConfig, paths: AppPaths) -> AppContext:
    return AppContext(
        config=config,
        paths=paths,
        store=build_store(config, paths),
        translator=Translator(config.default_language),
    )
