"""Tabular statements fed to the report strategies.

Column names are English so the same frame renders in every format.
"""
from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd

from brickbook.db.models import BrickLoad, BrickLoadLog, LogType
from brickbook.services.ledger import WorkerSummary, due_balance
from brickbook.services.rates import BRICKS_PER_UNIT
from brickbook.services.workers_service import WorkerLedger

WORKER_COLUMNS = ["Date", "Entry", "Work", "Usage", "Balance"]
LOAD_COLUMNS = ["Date", "Entry", "Bricks", "Rate", "Amount", "Paid", "Due"]


def worker_statement(ledger: WorkerLedger) -> pd.DataFrame:
    """Timeline of one worker with the running balance after each entry."""
    rows = []
    balance = 0.0
    for entry in ledger.timeline():
        balance += entry.signed_amount
        is_work = entry.kind == "work"
        rows.append(
            {
                "Date": entry.date,
                "Entry": entry.record.work_type.value if is_work else "usage",
                "Work": entry.record.amount if is_work else None,
                "Usage": None if is_work else entry.record.amount,
                "Balance": balance,
            }
        )
    return pd.DataFrame(rows, columns=WORKER_COLUMNS)


def brick_load_statement(load: BrickLoad, logs: Iterable[BrickLoadLog]) -> pd.DataFrame:
    """Logs of one load, oldest first, with the running due amount."""
    rows = []
    due = 0.0
    for log in sorted(logs, key=lambda item: item.date):
        is_brick = LogType(log.log_type) is LogType.BRICK
        due += log.amount if is_brick else -log.amount
        rows.append(
            {
                "Date": log.date,
                "Entry": LogType(log.log_type).value,
                "Bricks": round((log.brick_quantity or 0) * BRICKS_PER_UNIT) if is_brick else None,
                "Rate": log.brick_rate if is_brick else None,
                "Amount": log.amount if is_brick else None,
                "Paid": None if is_brick else log.amount,
                "Due": due,
            }
        )
    return pd.DataFrame(rows, columns=LOAD_COLUMNS)


def brick_load_summary(load: BrickLoad) -> dict[str, str]:
    return {
        "Village": load.village_name,
        "Phone": load.phone_number,
        "Total bricks": f"{round(load.brick_quantity * BRICKS_PER_UNIT):,}",
        "Total amount": f"{load.total_amount:,.2f}",
        "Paid": f"{load.amount_paid:,.2f}",
        "Due": f"{due_balance(load):,.2f}",
    }


def workers_summary(summaries: Sequence[WorkerSummary]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Name": s.worker.name,
                "Phone": s.worker.phone,
                "Initial debt": s.worker.initial_debt,
                "Balance": s.balance,
            }
            for s in summaries
        ],
        columns=["Name", "Phone", "Initial debt", "Balance"],
    )


def brick_loads_table(loads: Sequence[BrickLoad]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Village": load.village_name,
                "Phone": load.phone_number,
                "Date": load.date,
                "Bricks": round(load.brick_quantity * BRICKS_PER_UNIT),
                "Total": load.total_amount,
                "Paid": load.amount_paid,
                "Due": due_balance(load),
            }
            for load in loads
        ],
        columns=["Village", "Phone", "Date", "Bricks", "Total", "Paid", "Due"],
    )
