from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

BACKENDS = ("sqlite", "rest")


@dataclass(frozen=True)
class AppConfig:
    """Immutable application configuration."""

    app_name: str = "Brickbook"
    business_name: str = "JAI DURGA BRICKS"

    # Record store
    store_backend: str = "sqlite"
    rest_url: str = ""
    rest_anon_key: str = ""
    session_storage_key: str = "bricks_permanent_auth"
    db_timeout_seconds: int = 10
    http_timeout_seconds: int = 20
    login_link_ttl_minutes: int = 60

    # Backup
    backup_max_copies: int = 20

    # UI
    default_language: str = "te"
    whatsapp_country_code: str = "91"


CONFIG = AppConfig()


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Build configuration from ``BRICKBOOK_*`` environment variables.

    Args:
        environ: Mapping to read from, ``os.environ`` by default.

    Returns:
        AppConfig: Defaults overridden by the variables that are set.
    """
    env = os.environ if environ is None else environ
    backend = env.get("BRICKBOOK_STORE", CONFIG.store_backend).strip().lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown store backend: {backend!r}, expected one of {BACKENDS}")
    language = env.get("BRICKBOOK_LANGUAGE", CONFIG.default_language).strip().lower()
    return AppConfig(
        business_name=env.get("BRICKBOOK_BUSINESS_NAME", CONFIG.business_name),
        store_backend=backend,
        rest_url=env.get("BRICKBOOK_REST_URL", CONFIG.rest_url).rstrip("/"),
        rest_anon_key=env.get("BRICKBOOK_REST_ANON_KEY", CONFIG.rest_anon_key),
        db_timeout_seconds=int(env.get("BRICKBOOK_DB_TIMEOUT", CONFIG.db_timeout_seconds)),
        http_timeout_seconds=int(env.get("BRICKBOOK_HTTP_TIMEOUT", CONFIG.http_timeout_seconds)),
        backup_max_copies=int(env.get("BRICKBOOK_BACKUP_MAX_COPIES", CONFIG.backup_max_copies)),
        default_language=language,
    )
