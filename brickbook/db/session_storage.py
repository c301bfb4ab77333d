from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from brickbook.db.models import Session, User

logger = logging.getLogger(__name__)


class SessionStorage:
    """Persist the signed-in session under one key of a small JSON file."""

    def __init__(self, path: Path, key: str = "bricks_permanent_auth") -> None:
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable session file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def load(self) -> Optional[Session]:
        raw = self._read_all().get(self.key)
        if not raw:
            return None
        try:
            return Session(
                access_token=raw["access_token"],
                refresh_token=raw.get("refresh_token"),
                expires_at=raw.get("expires_at"),
                user=User(**raw["user"]),
            )
        except (KeyError, TypeError) as exc:
            logger.warning("Discarding malformed stored session: %s", exc)
            return None

    def save(self, session: Session) -> None:
        data = self._read_all()
        data[self.key] = {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_at": session.expires_at,
            "user": asdict(session.user),
        }
        self._write_all(data)

    def clear(self) -> None:
        data = self._read_all()
        if data.pop(self.key, None) is not None:
            self._write_all(data)
