from __future__ import annotations

import pytest

from brickbook.db.gateway import NotFoundError
from brickbook.db.models import UsageRecord, Worker, WorkRecord, WorkType
from brickbook.services.rates import WorkEntry
from brickbook.utils.validators import ValidationError


def test_create_and_list_workers(workers):
    a = workers.create_worker(" Ramu ", "9876543210")
    b = workers.create_worker("Sita", "9000000000", initial_debt="1500")
    assert a.id and a.name == "Ramu"
    assert b.initial_debt == 1500
    # newest first
    assert [w.name for w in workers.list_workers()] == ["Sita", "Ramu"]
    assert workers.get_worker(a.id).phone == "9876543210"


@pytest.mark.parametrize("name, phone", [("", "1"), ("  ", "1"), ("A", ""), (None, "1")])
def test_create_worker_requires_name_and_phone(workers, name, phone):
    with pytest.raises(ValidationError):
        workers.create_worker(name, phone)


def test_scenario_brick_carry_and_usage(workers):
    w = workers.create_worker("Ramu", "1")
    entry = WorkEntry(WorkType.BRICK_CARRY)
    entry.set_brick_count(1000)
    record = workers.add_work_record(w.id, entry, "2024-03-01")
    assert record.amount == 220
    assert record.brick_count == 1000
    assert record.is_driver is None and record.is_half_day is None
    workers.add_usage(w.id, "100", "2024-03-02")
    ledger = workers.worker_ledger(w.id)
    assert ledger.balance == 120
    assert ledger.total_earned == 220 and ledger.total_taken == 100
    assert [e.kind for e in ledger.timeline()] == ["work", "usage"]


def test_amount_is_fixed_at_creation(workers):
    w = workers.create_worker("Ramu", "1")
    entry = WorkEntry(WorkType.KUNDI)
    entry.set_driver(True)
    workers.add_work_record(w.id, entry, "2024-03-01")
    entry.set_driver(False)
    [stored] = workers.worker_ledger(w.id).work_records
    assert stored.amount == 500
    assert stored.is_driver is True


def test_manual_amount_override(workers):
    w = workers.create_worker("Ramu", "1")
    entry = WorkEntry(WorkType.BRICK_BAKING)
    entry.override_amount(1000)
    assert workers.add_work_record(w.id, entry, "2024-03-01").amount == 1000


def test_usage_validation(workers):
    w = workers.create_worker("Ramu", "1")
    for bad in ("", "0", "-5", "abc"):
        with pytest.raises(ValidationError):
            workers.add_usage(w.id, bad, "2024-03-01")
    with pytest.raises(ValidationError):
        workers.add_usage(w.id, "10", "01/03/2024")


def test_list_with_balances_sorted(workers):
    zero = workers.create_worker("Zero", "1")
    neg = workers.create_worker("Neg", "2")
    pos = workers.create_worker("Pos", "3")
    workers.add_work_record(pos.id, WorkEntry(WorkType.KUNDI), "2024-03-01")
    workers.add_usage(neg.id, 50, "2024-03-01")
    summaries = workers.list_workers_with_balances()
    assert [(s.worker.id, s.balance) for s in summaries] == [(pos.id, 400), (neg.id, -50), (zero.id, 0)]


def test_search(workers):
    workers.create_worker("Ramu", "98765")
    workers.create_worker("Sita", "12345")
    summaries = workers.list_workers_with_balances()
    assert [s.worker.name for s in workers.search(summaries, "RAM")] == ["Ramu"]
    assert [s.worker.name for s in workers.search(summaries, "234")] == ["Sita"]
    assert len(workers.search(summaries, "")) == 2
    assert workers.search(summaries, "nobody") == []


def test_delete_worker_cascades(workers, store):
    w = workers.create_worker("Ramu", "1")
    other = workers.create_worker("Sita", "2")
    workers.add_work_record(w.id, WorkEntry(), "2024-03-01")
    workers.add_usage(w.id, 10, "2024-03-01")
    workers.add_usage(other.id, 10, "2024-03-01")
    workers.delete_worker(w.id)
    assert [x.id for x in store.list(Worker)] == [other.id]
    assert store.list(WorkRecord) == []
    assert [u.worker_id for u in store.list(UsageRecord)] == [other.id]
    with pytest.raises(NotFoundError):
        workers.delete_worker(w.id)


def test_delete_single_records(workers):
    w = workers.create_worker("Ramu", "1")
    record = workers.add_work_record(w.id, WorkEntry(), "2024-03-01")
    usage = workers.add_usage(w.id, 10, "2024-03-01")
    workers.delete_work_record(record.id)
    workers.delete_usage_record(usage.id)
    assert workers.worker_ledger(w.id).balance == 0
    with pytest.raises(NotFoundError):
        workers.delete_usage_record(usage.id)


@pytest.mark.parametrize("amount", ["inf", "-inf", "nan"])
def test_usage_rejects_non_finite_amounts(workers, amount):
    w = workers.create_worker("Ramu", "1")
    workers.add_usage(w.id, 100, "2024-03-01")
    with pytest.raises(ValidationError):
        workers.add_usage(w.id, amount, "2024-03-02")
    ledger = workers.worker_ledger(w.id)
    assert ledger.balance == -100
    assert len(ledger.usage_records) == 1


@pytest.mark.parametrize("debt", ["nan", "inf", "1e400", "12.7"])
def test_initial_debt_must_be_whole_finite_rupees(workers, store, debt):
    with pytest.raises(ValidationError):
        workers.create_worker("Ramu", "1", initial_debt=debt)
    assert store.list(Worker) == []


def test_initial_debt_may_be_negative(workers):
    assert workers.create_worker("Ramu", "1", initial_debt="-300").initial_debt == -300


@pytest.mark.parametrize("typed", ["", "abc", "12a"])
def test_cleared_brick_count_is_not_saved(workers, typed):
    w = workers.create_worker("Ramu", "1")
    entry = WorkEntry(WorkType.BRICK_CARRY)
    entry.set_brick_count(3000)
    assert entry.enter_brick_count(typed) == 0
    with pytest.raises(ValidationError, match="brick count"):
        workers.add_work_record(w.id, entry, "2024-03-01")
    assert workers.worker_ledger(w.id).work_records == []
