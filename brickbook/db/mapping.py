"""Row <-> record translation at the gateway boundary.

Every backend stores snake_case columns; records are the dataclasses in
:mod:`brickbook.db.models`. Each table knows its owner column (for the
"records of one worker / logs of one load" listings) and its display order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from brickbook.db.models import (
    BrickLoad,
    BrickLoadLog,
    LogType,
    UsageRecord,
    User,
    Worker,
    WorkRecord,
    WorkType,
)

Row = Mapping[str, Any]


def _opt_bool(value: Any) -> bool | None:
    return None if value is None else bool(value)


def _opt_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _opt_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _number(value: Any) -> float:
    return float(value or 0)


def worker_from_row(row: Row) -> Worker:
    return Worker(
        id=str(row["id"]),
        name=row["name"],
        phone=row["phone"],
        initial_debt=_opt_int(row.get("initial_debt")),
        created_at=row.get("created_at"),
    )


def worker_to_row(worker: Worker) -> dict[str, Any]:
    return {"name": worker.name, "phone": worker.phone, "initial_debt": worker.initial_debt}


def work_record_from_row(row: Row) -> WorkRecord:
    return WorkRecord(
        id=str(row["id"]),
        worker_id=str(row["worker_id"]),
        work_type=WorkType(row["work_type"]),
        date=str(row["date"]),
        amount=_number(row["amount"]),
        is_driver=_opt_bool(row.get("is_driver")),
        brick_count=_opt_int(row.get("brick_count")),
        is_half_day=_opt_bool(row.get("is_half_day")),
        created_at=row.get("created_at"),
    )


def work_record_to_row(record: WorkRecord) -> dict[str, Any]:
    return {
        "worker_id": record.worker_id,
        "work_type": WorkType(record.work_type).value,
        "date": record.date,
        "amount": record.amount,
        "is_driver": record.is_driver,
        "brick_count": record.brick_count,
        "is_half_day": record.is_half_day,
    }


def usage_record_from_row(row: Row) -> UsageRecord:
    return UsageRecord(
        id=str(row["id"]),
        worker_id=str(row["worker_id"]),
        date=str(row["date"]),
        amount=_number(row["amount"]),
        created_at=row.get("created_at"),
    )


def usage_record_to_row(record: UsageRecord) -> dict[str, Any]:
    return {"worker_id": record.worker_id, "date": record.date, "amount": record.amount}


def brick_load_from_row(row: Row) -> BrickLoad:
    return BrickLoad(
        id=str(row["id"]),
        village_name=row["village_name"],
        phone_number=row["phone_number"],
        date=str(row["date"]),
        brick_quantity=_number(row.get("brick_quantity")),
        brick_rate=_number(row.get("brick_rate")),
        total_amount=_number(row.get("total_amount")),
        amount_paid=_number(row.get("amount_paid")),
        created_at=row.get("created_at"),
    )


def brick_load_to_row(load: BrickLoad) -> dict[str, Any]:
    return {
        "village_name": load.village_name,
        "phone_number": load.phone_number,
        "date": load.date,
        "brick_quantity": load.brick_quantity,
        "brick_rate": load.brick_rate,
        "total_amount": load.total_amount,
        "amount_paid": load.amount_paid,
    }


def brick_load_log_from_row(row: Row) -> BrickLoadLog:
    return BrickLoadLog(
        id=str(row["id"]),
        brick_load_id=str(row["brick_load_id"]),
        date=str(row["date"]),
        log_type=LogType(row["log_type"]),
        amount=_number(row["amount"]),
        brick_quantity=_opt_float(row.get("brick_quantity")),
        brick_rate=_opt_float(row.get("brick_rate")),
        created_at=row.get("created_at"),
    )


def brick_load_log_to_row(log: BrickLoadLog) -> dict[str, Any]:
    return {
        "brick_load_id": log.brick_load_id,
        "date": log.date,
        "log_type": LogType(log.log_type).value,
        "brick_quantity": log.brick_quantity,
        "brick_rate": log.brick_rate,
        "amount": log.amount,
    }


def user_from_row(row: Row) -> User:
    """Accept both a local ``users`` row and a hosted auth user object."""
    role = row.get("role") or (row.get("app_metadata") or {}).get("role") or "user"
    return User(id=str(row["id"]), email=row.get("email") or "", role=role)


@dataclass(frozen=True)
class TableSpec:
    name: str
    from_row: Callable[[Row], Any]
    to_row: Callable[[Any], dict[str, Any]]
    order_column: str
    descending: bool = False
    owner_column: str | None = None


TABLES: dict[type, TableSpec] = {
    Worker: TableSpec("workers", worker_from_row, worker_to_row, "created_at", descending=True),
    WorkRecord: TableSpec(
        "work_records", work_record_from_row, work_record_to_row, "date", owner_column="worker_id"
    ),
    UsageRecord: TableSpec(
        "usage_records", usage_record_from_row, usage_record_to_row, "date", owner_column="worker_id"
    ),
    BrickLoad: TableSpec(
        "brick_loads", brick_load_from_row, brick_load_to_row, "created_at", descending=True
    ),
    BrickLoadLog: TableSpec(
        "brick_load_logs",
        brick_load_log_from_row,
        brick_load_log_to_row,
        "date",
        descending=True,
        owner_column="brick_load_id",
    ),
}


def table_for(model: type) -> TableSpec:
    try:
        return TABLES[model]
    except KeyError:
        raise TypeError(f"No table is mapped for {model.__name__}") from None
