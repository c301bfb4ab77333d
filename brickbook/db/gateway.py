from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence, TypeVar

from brickbook.db.models import BrickLoad, BrickLoadLog, LogType, Session

T = TypeVar("T")


class StoreError(Exception):
    """Any failed round-trip to the record store."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NotFoundError(StoreError):
    """Raised by get/delete for an id that does not exist."""


class AuthError(StoreError):
    """Raised when sign-in, link verification or the session fails."""


@dataclass(frozen=True, slots=True)
class LoadDelta:
    """Increments applied to a brick load's running totals."""

    total_amount: float = 0.0
    brick_quantity: float = 0.0
    amount_paid: float = 0.0

    @classmethod
    def for_log(cls, log: BrickLoadLog) -> "LoadDelta":
        """What ``log`` adds to its load: bricks add amount and quantity, payments add to paid."""
        if LogType(log.log_type) is LogType.BRICK:
            return cls(total_amount=log.amount, brick_quantity=log.brick_quantity or 0.0)
        return cls(amount_paid=log.amount)

    def reversed(self) -> "LoadDelta":
        return LoadDelta(-self.total_amount, -self.brick_quantity, -self.amount_paid)


class RecordStore(ABC):
    """Generic CRUD and auth gateway shared by the local and hosted backends.

    ``model`` arguments are the record classes of :mod:`brickbook.db.models`;
    the table, owner column and ordering come from :mod:`brickbook.db.mapping`.
    The store never cascades deletes: callers remove children first with
    :meth:`delete_owned`.
    """

    # Records
    @abstractmethod
    def list(self, model: type[T], owner_id: str | None = None) -> list[T]:
        """Return all records of ``model``, optionally only those of one owner."""

    @abstractmethod
    def get(self, model: type[T], record_id: str) -> T:
        """Return one record or raise :class:`NotFoundError`."""

    @abstractmethod
    def create(self, record: T) -> T:
        """Insert ``record``; the returned copy carries the new id and timestamp."""

    @abstractmethod
    def delete(self, model: type[Any], record_id: str) -> None:
        """Delete one record or raise :class:`NotFoundError`."""

    @abstractmethod
    def delete_owned(self, model: type[Any], owner_id: str) -> int:
        """Delete every record of ``model`` owned by ``owner_id``; returns the count."""

    @abstractmethod
    def adjust_brick_load_totals(self, load_id: str, delta: LoadDelta) -> BrickLoad:
        """Atomically add ``delta`` to a load's totals and return the updated load."""

    @abstractmethod
    def create_brick_load(self, load: BrickLoad, logs: Sequence[BrickLoadLog]) -> BrickLoad:
        """Insert ``load`` with its first ``logs`` in one step; the totals start at the logs' sums.

        The logs' ``brick_load_id`` is ignored and set to the new load's id.
        """

    @abstractmethod
    def add_brick_load_log(self, log: BrickLoadLog) -> BrickLoad:
        """Insert ``log`` and apply it to its load in one step; returns the updated load."""

    @abstractmethod
    def delete_brick_load_log(self, log_id: str) -> BrickLoad:
        """Delete a log and take its contribution out of its load in one step."""

    # Session / auth
    @abstractmethod
    def current_session(self) -> Optional[Session]:
        ...

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> Session:
        ...

    @abstractmethod
    def sign_in_with_link(self, email: str, redirect_to: str | None = None) -> None:
        """Send a one-time sign-in link/code to ``email``."""

    @abstractmethod
    def verify_link(self, email: str, token: str) -> Session:
        """Exchange the one-time code from the link for a session."""

    @abstractmethod
    def sign_out(self) -> None:
        ...
