from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import os
import re
import secrets
import sqlite3
import time
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, TypeVar

from brickbook.db.connection import Database
from brickbook.db.gateway import AuthError, LoadDelta, NotFoundError, RecordStore, StoreError
from brickbook.db.mapping import brick_load_from_row, brick_load_log_from_row, table_for, user_from_row
from brickbook.db.models import BrickLoad, BrickLoadLog, Session, User
from brickbook.db.session_storage import SessionStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")

_QUERY_NAME_RE = re.compile(r"^-- \[(?P<name>[^\]]+)\]")

PBKDF2_ITERATIONS = 150_000

LinkSender = Callable[[str, str], None]


class QueryStore:
    """Load and cache named SQL queries from queries.sql."""

    def __init__(self, sql_path: Path | None = None) -> None:
        self._queries: Dict[str, str] = {}
        self._load(sql_path or Path(__file__).with_name("queries.sql"))

    def _load(self, sql_path: Path) -> None:
        text = sql_path.read_text(encoding="utf-8")
        current: str | None = None
        buffer: list[str] = []
        for line in text.splitlines():
            if m := _QUERY_NAME_RE.match(line.strip()):
                if current and buffer:
                    self._queries[current] = "\n".join(buffer).strip()
                    buffer.clear()
                current = m.group("name")
                continue
            if current:
                buffer.append(line)
        if current and buffer:
            self._queries[current] = "\n".join(buffer).strip()

    def get(self, name: str) -> str:
        sql = self._queries.get(name)
        if not sql:
            raise KeyError(f"Query not found: {name}")
        return sql


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _pbkdf2_sha256(password: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _log_link(email: str, token: str) -> None:
    logger.info("One-time sign-in code for %s: %s", email, token)


class SqliteStore(RecordStore):
    """Record store over a local SQLite file, with local password/link auth."""

    def __init__(
        self,
        db: Database,
        session_storage: SessionStorage,
        queries: QueryStore | None = None,
        link_sender: LinkSender | None = None,
        link_ttl_seconds: int = 3600,
    ) -> None:
        self.db = db
        self.session_storage = session_storage
        self.queries = queries or QueryStore()
        self.link_sender = link_sender or _log_link
        self.link_ttl_seconds = link_ttl_seconds

    def _run(self, name: str, params: dict[str, Any]) -> sqlite3.Cursor:
        try:
            return self.db.execute(self.queries.get(name), params)
        except sqlite3.Error as exc:
            logger.error("Query %s failed: %s", name, exc)
            raise StoreError(f"{name}: {exc}") from exc

    def _fetch_all(self, name: str, params: dict[str, Any]) -> list[sqlite3.Row]:
        return self._run(name, params).fetchall()

    def _fetch_one(self, name: str, params: dict[str, Any]) -> sqlite3.Row | None:
        return self._run(name, params).fetchone()

    # Records
    def list(self, model: type[T], owner_id: str | None = None) -> list[T]:
        spec = table_for(model)
        if owner_id is None:
            rows = self._fetch_all(f"{spec.name}.select_all", {})
        else:
            if spec.owner_column is None:
                raise TypeError(f"{spec.name} has no owner column")
            rows = self._fetch_all(f"{spec.name}.select_by_owner", {"owner_id": owner_id})
        return [spec.from_row(dict(r)) for r in rows]

    def get(self, model: type[T], record_id: str) -> T:
        spec = table_for(model)
        row = self._fetch_one(f"{spec.name}.select_by_id", {"id": record_id})
        if row is None:
            raise NotFoundError(f"{spec.name} {record_id} not found", status=404)
        return spec.from_row(dict(row))

    def create(self, record: T) -> T:
        spec = table_for(type(record))
        row = spec.to_row(record)
        row["id"] = uuid.uuid4().hex
        row["created_at"] = _now_iso()
        self._run(f"{spec.name}.insert", row)
        logger.info("Created %s %s", spec.name, row["id"])
        return spec.from_row(row)

    def delete(self, model: type[Any], record_id: str) -> None:
        spec = table_for(model)
        cur = self._run(f"{spec.name}.delete_by_id", {"id": record_id})
        if cur.rowcount == 0:
            raise NotFoundError(f"{spec.name} {record_id} not found", status=404)
        logger.info("Deleted %s %s", spec.name, record_id)

    def delete_owned(self, model: type[Any], owner_id: str) -> int:
        spec = table_for(model)
        if spec.owner_column is None:
            raise TypeError(f"{spec.name} has no owner column")
        cur = self._run(f"{spec.name}.delete_by_owner", {"owner_id": owner_id})
        return cur.rowcount

    @contextmanager
    def _transaction(self, name: str) -> Iterator[sqlite3.Connection]:
        """One ``BEGIN IMMEDIATE`` block; any failure rolls every statement back."""
        try:
            with self.db.transaction() as conn:
                yield conn
        except sqlite3.Error as exc:
            logger.error("Transaction %s failed: %s", name, exc)
            raise StoreError(f"{name}: {exc}") from exc

    def _insert_log(self, conn: sqlite3.Connection, log: BrickLoadLog) -> BrickLoadLog:
        spec = table_for(BrickLoadLog)
        row = spec.to_row(log)
        row["id"] = uuid.uuid4().hex
        row["created_at"] = _now_iso()
        conn.execute(self.queries.get("brick_load_logs.insert"), row)
        return spec.from_row(row)

    def _adjust(self, conn: sqlite3.Connection, load_id: str, delta: LoadDelta) -> BrickLoad:
        params = {
            "id": load_id,
            "total_amount": delta.total_amount,
            "brick_quantity": delta.brick_quantity,
            "amount_paid": delta.amount_paid,
        }
        cur = conn.execute(self.queries.get("brick_loads.adjust_totals"), params)
        if cur.rowcount == 0:
            raise NotFoundError(f"brick_loads {load_id} not found", status=404)
        row = conn.execute(self.queries.get("brick_loads.select_by_id"), {"id": load_id}).fetchone()
        return brick_load_from_row(dict(row))

    def adjust_brick_load_totals(self, load_id: str, delta: LoadDelta) -> BrickLoad:
        with self._transaction("brick_loads.adjust_totals") as conn:
            return self._adjust(conn, load_id, delta)

    def create_brick_load(self, load: BrickLoad, logs: Sequence[BrickLoadLog]) -> BrickLoad:
        spec = table_for(BrickLoad)
        row = spec.to_row(replace(load, total_amount=0.0, brick_quantity=0.0, amount_paid=0.0))
        row["id"] = uuid.uuid4().hex
        row["created_at"] = _now_iso()
        with self._transaction("brick_loads.create") as conn:
            conn.execute(self.queries.get("brick_loads.insert"), row)
            created = spec.from_row(row)
            for log in logs:
                stored = self._insert_log(conn, replace(log, brick_load_id=row["id"]))
                created = self._adjust(conn, row["id"], LoadDelta.for_log(stored))
        logger.info("Created brick_loads %s with %d logs", row["id"], len(logs))
        return created

    def add_brick_load_log(self, log: BrickLoadLog) -> BrickLoad:
        with self._transaction("brick_load_logs.add") as conn:
            stored = self._insert_log(conn, log)
            load = self._adjust(conn, stored.brick_load_id, LoadDelta.for_log(stored))
        logger.info("Created brick_load_logs %s", stored.id)
        return load

    def delete_brick_load_log(self, log_id: str) -> BrickLoad:
        with self._transaction("brick_load_logs.remove") as conn:
            row = conn.execute(self.queries.get("brick_load_logs.select_by_id"), {"id": log_id}).fetchone()
            if row is None:
                raise NotFoundError(f"brick_load_logs {log_id} not found", status=404)
            log = brick_load_log_from_row(dict(row))
            conn.execute(self.queries.get("brick_load_logs.delete_by_id"), {"id": log_id})
            load = self._adjust(conn, log.brick_load_id, LoadDelta.for_log(log).reversed())
        logger.info("Deleted brick_load_logs %s", log_id)
        return load

    # Users
    def register_user(self, email: str, password: str, role: str = "admin") -> User:
        """Create a local account (first start of a local installation)."""
        salt = os.urandom(16)
        row = {
            "id": uuid.uuid4().hex,
            "email": email.strip().lower(),
            "role": role,
            "salt": base64.b64encode(salt).decode("ascii"),
            "iterations": PBKDF2_ITERATIONS,
            "pw_hash_hex": _pbkdf2_sha256(password, salt).hex(),
            "created_at": _now_iso(),
        }
        self._run("users.insert", row)
        return user_from_row(row)

    def has_users(self) -> bool:
        row = self.db.query_one("SELECT COUNT(*) AS n FROM users")
        return bool(row and row["n"])

    def _open_session(self, user: User) -> Session:
        session = Session(access_token=secrets.token_hex(32), user=user)
        self._run(
            "sessions.insert",
            {"access_token": session.access_token, "user_id": user.id, "created_at": _now_iso()},
        )
        self.session_storage.save(session)
        logger.info("Signed in %s", user.email)
        return session

    # Session / auth
    def current_session(self) -> Optional[Session]:
        session = self.session_storage.load()
        if session is None:
            return None
        if self._fetch_one("sessions.select", {"access_token": session.access_token}) is None:
            self.session_storage.clear()
            return None
        return session

    def sign_in_with_password(self, email: str, password: str) -> Session:
        row = self._fetch_one("users.select_by_email", {"email": email.strip().lower()})
        if row is None:
            raise AuthError("Invalid login credentials", status=400)
        salt = base64.b64decode(row["salt"])
        dk = _pbkdf2_sha256(password, salt, int(row["iterations"]))
        if not hmac.compare_digest(dk.hex(), row["pw_hash_hex"]):
            raise AuthError("Invalid login credentials", status=400)
        return self._open_session(user_from_row(dict(row)))

    def sign_in_with_link(self, email: str, redirect_to: str | None = None) -> None:
        row = self._fetch_one("users.select_by_email", {"email": email.strip().lower()})
        if row is None:
            raise AuthError("Signups not allowed for otp", status=422)
        token = f"{secrets.randbelow(1_000_000):06d}"
        self._run(
            "login_links.insert",
            {
                "token_hash": _hash_token(f"{row['id']}:{token}"),
                "user_id": row["id"],
                "expires_at": time.time() + self.link_ttl_seconds,
            },
        )
        self.link_sender(row["email"], token)

    def verify_link(self, email: str, token: str) -> Session:
        row = self._fetch_one("users.select_by_email", {"email": email.strip().lower()})
        if row is None:
            raise AuthError("Token has expired or is invalid", status=403)
        token_hash = _hash_token(f"{row['id']}:{token.strip()}")
        link = self._fetch_one("login_links.select_valid", {"token_hash": token_hash, "now": time.time()})
        if link is None:
            raise AuthError("Token has expired or is invalid", status=403)
        self._run("login_links.mark_used", {"token_hash": token_hash})
        return self._open_session(user_from_row(dict(row)))

    def sign_out(self) -> None:
        session = self.session_storage.load()
        if session is not None:
            self._run("sessions.delete", {"access_token": session.access_token})
        self.session_storage.clear()
