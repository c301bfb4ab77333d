from __future__ import annotations

from brickbook.db.gateway import RecordStore


class ServiceError(Exception):
    """Raised for service-layer errors."""


class BaseService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def _raise(self, message: str) -> None:
        raise ServiceError(message)
