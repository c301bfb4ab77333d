from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class WorkType(str, Enum):
    """Work-type tags; values are the tags stored in ``work_records.work_type``."""

    KUNDI = "kundi"
    KUNDI_DRIVER = "kundiDriver"
    BRICK_CARRY = "brickCarry"
    BRICK_BAKING = "brickBaking"
    BRICK_LOAD_TRACTOR = "brickLoadTractor"
    BRICK_LOAD_VAN = "brickLoadVan"
    TOP_WORK = "topWork"


class LogType(str, Enum):
    BRICK = "brick"
    PAYMENT = "payment"


@dataclass(slots=True)
class Worker:
    id: Optional[str]
    name: str
    phone: str
    initial_debt: Optional[int] = None
    created_at: Optional[str] = None


@dataclass(slots=True)
class WorkRecord:
    id: Optional[str]
    worker_id: str
    work_type: WorkType
    date: str
    amount: float
    is_driver: Optional[bool] = None
    brick_count: Optional[int] = None
    is_half_day: Optional[bool] = None
    created_at: Optional[str] = None


@dataclass(slots=True)
class UsageRecord:
    id: Optional[str]
    worker_id: str
    date: str
    amount: float
    created_at: Optional[str] = None


@dataclass(slots=True)
class BrickLoad:
    id: Optional[str]
    village_name: str
    phone_number: str
    date: str
    brick_quantity: float = 0.0
    brick_rate: float = 0.0
    total_amount: float = 0.0
    amount_paid: float = 0.0
    created_at: Optional[str] = None

    @property
    def due(self) -> float:
        return self.total_amount - self.amount_paid


@dataclass(slots=True)
class BrickLoadLog:
    id: Optional[str]
    brick_load_id: str
    date: str
    log_type: LogType
    amount: float
    brick_quantity: Optional[float] = None
    brick_rate: Optional[float] = None
    created_at: Optional[str] = None


@dataclass(slots=True)
class User:
    id: str
    email: str
    role: str = "user"


@dataclass(slots=True)
class Session:
    access_token: str
    user: User
    refresh_token: Optional[str] = None
    expires_at: Optional[float] = None
