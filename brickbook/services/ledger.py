from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Literal, Sequence, Union

from brickbook.db.gateway import LoadDelta
from brickbook.db.models import BrickLoad, BrickLoadLog, LogType, UsageRecord, Worker, WorkRecord, WorkType
from brickbook.services.rates import BRICKS_PER_UNIT

USAGE_FILTER = "usage"


@dataclass(frozen=True, slots=True)
class WorkerSummary:
    worker: Worker
    balance: float


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    kind: Literal["work", "usage"]
    record: Union[WorkRecord, UsageRecord]

    @property
    def date(self) -> str:
        return self.record.date

    @property
    def signed_amount(self) -> float:
        return self.record.amount if self.kind == "work" else -self.record.amount


@dataclass(frozen=True, slots=True)
class LoadTotals:
    brick_total: float
    payment_total: float
    brick_quantity: float

    @property
    def balance(self) -> float:
        return self.brick_total - self.payment_total


# Worker balances

def total_amount(records: Iterable[WorkRecord | UsageRecord]) -> float:
    return sum(r.amount for r in records)


def worker_balance(work_records: Iterable[WorkRecord], usage_records: Iterable[UsageRecord]) -> float:
    """Earned minus taken. Initial debt is shown separately and is not part of it."""
    return total_amount(work_records) - total_amount(usage_records)


def balances_by_worker(
    workers: Iterable[Worker],
    work_records: Iterable[WorkRecord],
    usage_records: Iterable[UsageRecord],
) -> list[WorkerSummary]:
    """One summary per worker, in the order the workers were given."""
    earned: dict[str, float] = defaultdict(float)
    taken: dict[str, float] = defaultdict(float)
    for record in work_records:
        earned[record.worker_id] += record.amount
    for usage in usage_records:
        taken[usage.worker_id] += usage.amount
    return [WorkerSummary(w, earned[w.id] - taken[w.id]) for w in workers]


def _balance_rank(summary: WorkerSummary) -> tuple[int, float]:
    if summary.balance > 0:
        return (0, -summary.balance)
    if summary.balance < 0:
        return (1, summary.balance)
    return (2, 0.0)


def sort_by_balance(summaries: Sequence[WorkerSummary]) -> list[WorkerSummary]:
    """Positive balances first (largest first), then negative (most negative first), zero last.

    ``sorted`` is stable, so ties keep the incoming order.
    """
    return sorted(summaries, key=_balance_rank)


# Record lists

def filter_records(
    work_records: Sequence[WorkRecord],
    usage_records: Sequence[UsageRecord],
    date: str | None = None,
    work_type: str | None = None,
) -> tuple[list[WorkRecord], list[UsageRecord]]:
    """Apply the detail-view filters.

    ``work_type`` may be a work type tag, ``"usage"`` (usage only) or empty (all).
    """
    work = [r for r in work_records if not date or r.date == date]
    usage = [r for r in usage_records if not date or r.date == date]
    if work_type:
        if work_type == USAGE_FILTER:
            work = []
        else:
            wanted = WorkType(work_type)
            work = [r for r in work if r.work_type == wanted]
            usage = []
    return work, usage


def merge_timeline(work_records: Iterable[WorkRecord], usage_records: Iterable[UsageRecord]) -> list[LedgerEntry]:
    """Work and usage records in one list, oldest date first."""
    combined = [LedgerEntry("work", r) for r in work_records]
    combined += [LedgerEntry("usage", r) for r in usage_records]
    return sorted(combined, key=lambda e: e.date)


# Brick loads

def bricks_to_units(bricks: float) -> float:
    """Brick count to the stored unit of thousands."""
    return bricks / BRICKS_PER_UNIT


def brick_amount(bricks: float, rate: float) -> float:
    """Price of ``bricks`` at ``rate`` rupees per thousand."""
    return bricks * rate / BRICKS_PER_UNIT


def due_balance(load: BrickLoad) -> float:
    """Amount still owed; negative when the customer has overpaid."""
    return load.total_amount - load.amount_paid


def log_contribution(log: BrickLoadLog) -> LoadDelta:
    return LoadDelta.for_log(log)


def log_totals(logs: Iterable[BrickLoadLog]) -> LoadTotals:
    brick_total = payment_total = quantity = 0.0
    for log in logs:
        if LogType(log.log_type) is LogType.BRICK:
            brick_total += log.amount
            quantity += log.brick_quantity or 0.0
        else:
            payment_total += log.amount
    return LoadTotals(brick_total=brick_total, payment_total=payment_total, brick_quantity=quantity)


def totals_agree(load: BrickLoad, totals: LoadTotals, tolerance: float = 1e-6) -> bool:
    """Whether the running fields of ``load`` match a recomputation from its logs."""
    return (
        abs(load.total_amount - totals.brick_total) <= tolerance
        and abs(load.amount_paid - totals.payment_total) <= tolerance
        and abs(load.brick_quantity - totals.brick_quantity) <= tolerance
    )
