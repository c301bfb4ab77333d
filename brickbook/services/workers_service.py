from __future__ import annotations

import logging
from dataclasses import dataclass

from brickbook.db.models import UsageRecord, Worker, WorkRecord
from brickbook.services.common import BaseService
from brickbook.services.ledger import (
    LedgerEntry,
    WorkerSummary,
    balances_by_worker,
    merge_timeline,
    sort_by_balance,
    total_amount,
    worker_balance,
)
from brickbook.services.rates import WorkEntry
from brickbook.utils.text import matches_query
from brickbook.utils.validators import (
    ValidationError,
    parse_amount,
    parse_iso_date,
    parse_whole_amount,
    require_non_negative,
    require_positive,
    require_text,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkerLedger:
    worker: Worker
    work_records: list[WorkRecord]
    usage_records: list[UsageRecord]

    @property
    def total_earned(self) -> float:
        return total_amount(self.work_records)

    @property
    def total_taken(self) -> float:
        return total_amount(self.usage_records)

    @property
    def balance(self) -> float:
        return worker_balance(self.work_records, self.usage_records)

    def timeline(self) -> list[LedgerEntry]:
        return merge_timeline(self.work_records, self.usage_records)


class WorkersService(BaseService):
    def create_worker(self, name: str, phone: str, initial_debt: str | float | None = None) -> Worker:
        debt = None
        if initial_debt not in (None, ""):
            debt = parse_whole_amount(initial_debt, "initial debt")
        worker = Worker(
            id=None,
            name=require_text(name, "name"),
            phone=require_text(phone, "phone"),
            initial_debt=debt,
        )
        created = self.store.create(worker)
        logger.info("Worker %s created: %s", created.id, created.name)
        return created

    def list_workers(self) -> list[Worker]:
        return self.store.list(Worker)

    def get_worker(self, worker_id: str) -> Worker:
        return self.store.get(Worker, worker_id)

    def list_workers_with_balances(self) -> list[WorkerSummary]:
        """All workers with their balances, ordered for the main list."""
        workers = self.store.list(Worker)
        work = self.store.list(WorkRecord)
        usage = self.store.list(UsageRecord)
        return sort_by_balance(balances_by_worker(workers, work, usage))

    @staticmethod
    def search(summaries: list[WorkerSummary], query: str | None) -> list[WorkerSummary]:
        return [s for s in summaries if matches_query(query, s.worker.name, s.worker.phone)]

    def delete_worker(self, worker_id: str) -> None:
        """Delete a worker together with all of their work and usage records."""
        self.store.get(Worker, worker_id)
        removed_work = self.store.delete_owned(WorkRecord, worker_id)
        removed_usage = self.store.delete_owned(UsageRecord, worker_id)
        self.store.delete(Worker, worker_id)
        logger.info("Worker %s deleted with %d work and %d usage records", worker_id, removed_work, removed_usage)

    def worker_ledger(self, worker_id: str) -> WorkerLedger:
        worker = self.store.get(Worker, worker_id)
        return WorkerLedger(
            worker=worker,
            work_records=self.store.list(WorkRecord, owner_id=worker_id),
            usage_records=self.store.list(UsageRecord, owner_id=worker_id),
        )

    def add_work_record(self, worker_id: str, entry: WorkEntry, date: str) -> WorkRecord:
        parse_iso_date(date)
        missing = entry.missing_fields()
        if missing:
            raise ValidationError(f"{', '.join(missing)} is required")
        require_non_negative(entry.amount, "amount")
        record = WorkRecord(
            id=None,
            worker_id=worker_id,
            work_type=entry.work_type,
            date=date,
            amount=entry.amount,
            **entry.record_fields(),
        )
        created = self.store.create(record)
        logger.info("Work record %s (%s, %s) added for worker %s", created.id, created.work_type.value, created.amount, worker_id)
        return created

    def add_usage(self, worker_id: str, amount: str | float, date: str) -> UsageRecord:
        parse_iso_date(date)
        value = parse_amount(amount, "amount")
        require_positive(value, "amount")
        created = self.store.create(UsageRecord(id=None, worker_id=worker_id, date=date, amount=value))
        logger.info("Usage %s (%s) added for worker %s", created.id, created.amount, worker_id)
        return created

    def delete_work_record(self, record_id: str) -> None:
        self.store.delete(WorkRecord, record_id)

    def delete_usage_record(self, record_id: str) -> None:
        self.store.delete(UsageRecord, record_id)
