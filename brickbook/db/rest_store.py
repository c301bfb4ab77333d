from __future__ import annotations

import json
import logging
import ssl
import time
from dataclasses import dataclass
from http.client import HTTPConnection, HTTPException, HTTPSConnection
from typing import Any, Optional, Sequence, TypeVar
from urllib.parse import urlencode, urlparse

from brickbook.db.gateway import AuthError, LoadDelta, NotFoundError, RecordStore, StoreError
from brickbook.db.mapping import (
    brick_load_from_row,
    brick_load_log_to_row,
    brick_load_to_row,
    table_for,
    user_from_row,
)
from brickbook.db.models import BrickLoad, BrickLoadLog, Session
from brickbook.db.session_storage import SessionStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Refresh a stored session this many seconds before it expires.
REFRESH_MARGIN_SECONDS = 60


@dataclass
class RestConfig:
    base_url: str
    anon_key: str
    timeout_seconds: int = 20


class RestStore(RecordStore):
    """Hosted backend speaking the PostgREST (``/rest/v1``) and GoTrue (``/auth/v1``) APIs."""

    def __init__(self, cfg: RestConfig, session_storage: SessionStorage) -> None:
        if not cfg.base_url:
            raise ValueError("REST backend needs a base URL")
        self.cfg = cfg
        self.session_storage = session_storage
        parsed = urlparse(cfg.base_url)
        self._scheme = parsed.scheme or "https"
        self._host = parsed.hostname or ""
        self._port = parsed.port
        self._prefix = parsed.path.rstrip("/")

    # HTTP plumbing
    def _conn_api(self) -> HTTPConnection:
        if self._scheme == "http":
            return HTTPConnection(self._host, self._port or 80, timeout=self.cfg.timeout_seconds)
        context = ssl.create_default_context()
        return HTTPSConnection(self._host, self._port or 443, timeout=self.cfg.timeout_seconds, context=context)

    def _headers(self, token: str | None = None, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.cfg.anon_key,
            "Authorization": f"Bearer {token or self._access_token() or self.cfg.anon_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _access_token(self) -> str | None:
        session = self.session_storage.load()
        return session.access_token if session else None

    def _request(
        self,
        method: str,
        path: str,
        query: dict[str, str] | list[tuple[str, str]] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
        error_cls: type[StoreError] = StoreError,
    ) -> Any:
        url = f"{self._prefix}{path}"
        if query:
            url = f"{url}?{urlencode(query)}"
        payload = json.dumps(body).encode("utf-8") if body is not None else None
        conn = self._conn_api()
        try:
            conn.request(method, url, body=payload, headers=headers or self._headers())
            resp = conn.getresponse()
            raw = resp.read()
        except (OSError, HTTPException) as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise StoreError(f"{method} {path}: {exc}") from exc
        finally:
            conn.close()

        data: Any = None
        if raw:
            try:
                data = json.loads(raw.decode("utf-8"))
            except ValueError:
                data = raw.decode("utf-8", errors="replace")
        if resp.status >= 400:
            message = _error_message(data) or resp.reason
            logger.error("%s %s -> %s %s", method, path, resp.status, message)
            raise error_cls(message, status=resp.status)
        return data

    # Records
    def list(self, model: type[T], owner_id: str | None = None) -> list[T]:
        spec = table_for(model)
        direction = "desc" if spec.descending else "asc"
        query = [("select", "*"), ("order", f"{spec.order_column}.{direction}")]
        if owner_id is not None:
            if spec.owner_column is None:
                raise TypeError(f"{spec.name} has no owner column")
            query.append((spec.owner_column, f"eq.{owner_id}"))
        rows = self._request("GET", f"/rest/v1/{spec.name}", query) or []
        return [spec.from_row(r) for r in rows]

    def get(self, model: type[T], record_id: str) -> T:
        spec = table_for(model)
        rows = self._request("GET", f"/rest/v1/{spec.name}", [("select", "*"), ("id", f"eq.{record_id}")])
        if not rows:
            raise NotFoundError(f"{spec.name} {record_id} not found", status=404)
        return spec.from_row(rows[0])

    def create(self, record: T) -> T:
        spec = table_for(type(record))
        row = {k: v for k, v in spec.to_row(record).items() if v is not None}
        rows = self._request(
            "POST",
            f"/rest/v1/{spec.name}",
            [("select", "*")],
            body=[row],
            headers=self._headers(prefer="return=representation"),
        )
        if not rows:
            raise StoreError(f"{spec.name}: insert returned no row")
        logger.info("Created %s %s", spec.name, rows[0].get("id"))
        return spec.from_row(rows[0])

    def delete(self, model: type[Any], record_id: str) -> None:
        spec = table_for(model)
        rows = self._request(
            "DELETE",
            f"/rest/v1/{spec.name}",
            [("id", f"eq.{record_id}")],
            headers=self._headers(prefer="return=representation"),
        )
        if not rows:
            raise NotFoundError(f"{spec.name} {record_id} not found", status=404)
        logger.info("Deleted %s %s", spec.name, record_id)

    def delete_owned(self, model: type[Any], owner_id: str) -> int:
        spec = table_for(model)
        if spec.owner_column is None:
            raise TypeError(f"{spec.name} has no owner column")
        rows = self._request(
            "DELETE",
            f"/rest/v1/{spec.name}",
            [(spec.owner_column, f"eq.{owner_id}")],
            headers=self._headers(prefer="return=representation"),
        )
        return len(rows or [])

    def _load_rpc(self, function: str, body: dict[str, Any], missing: str) -> BrickLoad:
        data = self._request("POST", f"/rest/v1/rpc/{function}", body=body)
        row = (data[0] if data else None) if isinstance(data, list) else data
        if not row:
            raise NotFoundError(f"{missing} not found", status=404)
        return brick_load_from_row(row)

    def adjust_brick_load_totals(self, load_id: str, delta: LoadDelta) -> BrickLoad:
        return self._load_rpc(
            "adjust_brick_load_totals",
            {
                "load_id": load_id,
                "total_delta": delta.total_amount,
                "quantity_delta": delta.brick_quantity,
                "paid_delta": delta.amount_paid,
            },
            f"brick_loads {load_id}",
        )

    def create_brick_load(self, load: BrickLoad, logs: Sequence[BrickLoadLog]) -> BrickLoad:
        load_row = brick_load_to_row(load)
        for column in ("total_amount", "brick_quantity", "amount_paid"):
            load_row.pop(column)
        log_rows = []
        for log in logs:
            row = {k: v for k, v in brick_load_log_to_row(log).items() if v is not None}
            row.pop("brick_load_id", None)
            log_rows.append(row)
        created = self._load_rpc("create_brick_load", {"new_load": load_row, "load_logs": log_rows}, "new brick load")
        logger.info("Created brick_loads %s with %d logs", created.id, len(log_rows))
        return created

    def add_brick_load_log(self, log: BrickLoadLog) -> BrickLoad:
        row = {k: v for k, v in brick_load_log_to_row(log).items() if v is not None}
        return self._load_rpc("add_brick_load_log", {"new_log": row}, f"brick_loads {log.brick_load_id}")

    def delete_brick_load_log(self, log_id: str) -> BrickLoad:
        load = self._load_rpc("delete_brick_load_log", {"log_id": log_id}, f"brick_load_logs {log_id}")
        logger.info("Deleted brick_load_logs %s", log_id)
        return load

    # Session / auth
    def _session_from_auth(self, data: dict[str, Any]) -> Session:
        try:
            expires_at = data.get("expires_at")
            if expires_at is None and data.get("expires_in") is not None:
                expires_at = time.time() + float(data["expires_in"])
            session = Session(
                access_token=data["access_token"],
                refresh_token=data.get("refresh_token"),
                expires_at=float(expires_at) if expires_at is not None else None,
                user=user_from_row(data["user"]),
            )
        except (KeyError, TypeError) as exc:
            raise AuthError(f"Malformed auth response: {exc}") from exc
        self.session_storage.save(session)
        return session

    def current_session(self) -> Optional[Session]:
        session = self.session_storage.load()
        if session is None:
            return None
        if session.expires_at is None or session.expires_at - REFRESH_MARGIN_SECONDS > time.time():
            return session
        if not session.refresh_token:
            self.session_storage.clear()
            return None
        try:
            data = self._request(
                "POST",
                "/auth/v1/token",
                {"grant_type": "refresh_token"},
                body={"refresh_token": session.refresh_token},
                headers=self._headers(token=self.cfg.anon_key),
                error_cls=AuthError,
            )
        except AuthError:
            logger.warning("Stored session could not be refreshed; signing out")
            self.session_storage.clear()
            return None
        return self._session_from_auth(data)

    def sign_in_with_password(self, email: str, password: str) -> Session:
        data = self._request(
            "POST",
            "/auth/v1/token",
            {"grant_type": "password"},
            body={"email": email, "password": password},
            headers=self._headers(token=self.cfg.anon_key),
            error_cls=AuthError,
        )
        session = self._session_from_auth(data)
        logger.info("Signed in %s", session.user.email)
        return session

    def sign_in_with_link(self, email: str, redirect_to: str | None = None) -> None:
        query = {"redirect_to": redirect_to} if redirect_to else None
        self._request(
            "POST",
            "/auth/v1/otp",
            query,
            body={"email": email, "create_user": False},
            headers=self._headers(token=self.cfg.anon_key),
            error_cls=AuthError,
        )
        logger.info("Sign-in link sent to %s", email)

    def verify_link(self, email: str, token: str) -> Session:
        data = self._request(
            "POST",
            "/auth/v1/verify",
            body={"type": "email", "email": email, "token": token.strip()},
            headers=self._headers(token=self.cfg.anon_key),
            error_cls=AuthError,
        )
        return self._session_from_auth(data)

    def sign_out(self) -> None:
        token = self._access_token()
        try:
            if token:
                self._request("POST", "/auth/v1/logout", headers=self._headers(token=token), error_cls=AuthError)
        finally:
            self.session_storage.clear()


def _error_message(data: Any) -> str | None:
    if isinstance(data, dict):
        for key in ("message", "msg", "error_description", "error"):
            if data.get(key):
                return str(data[key])
    if isinstance(data, str) and data:
        return data
    return None
