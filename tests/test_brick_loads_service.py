from __future__ import annotations

import random
import sqlite3
from urllib.parse import unquote

import pytest

from brickbook.db.gateway import NotFoundError, StoreError
from brickbook.db.models import BrickLoad, BrickLoadLog, LogType
from brickbook.services.ledger import log_totals, totals_agree
from brickbook.utils.validators import ValidationError


def _assert_consistent(loads, load_id):
    result = loads.reconcile(load_id)
    assert result.consistent
    assert totals_agree(result.load, log_totals(loads.list_logs(load_id)))


def test_scenario_create_pay_delete(loads):
    load = loads.create_load("Rampur", "98765 43210", 5000, 500, "2024-02-01")
    assert load.brick_quantity == 5
    assert load.total_amount == 2500
    assert load.brick_rate == 500

    load = loads.add_payment(load.id, 1000, "2024-02-02")
    assert load.due == 1500

    [brick_log] = [log for log in loads.list_logs(load.id) if log.log_type is LogType.BRICK]
    load = loads.delete_log(brick_log.id)
    assert load.total_amount == 0
    assert load.brick_quantity == 0
    assert load.due == -1000
    _assert_consistent(loads, load.id)


def test_create_with_initial_payment(loads):
    load = loads.create_load("Rampur", "1", "2000", "600", "2024-02-01", amount_paid="500")
    assert load.total_amount == 1200
    assert load.amount_paid == 500
    logs = loads.list_logs(load.id)
    assert sorted(log.log_type.value for log in logs) == ["brick", "payment"]
    _assert_consistent(loads, load.id)


def test_create_validation(loads, store):
    with pytest.raises(ValidationError):
        loads.create_load("", "1", 1000, 500, "2024-02-01")
    with pytest.raises(ValidationError):
        loads.create_load("V", "1", 0, 500, "2024-02-01")
    with pytest.raises(ValidationError):
        loads.create_load("V", "1", 1000, -1, "2024-02-01")
    assert store.list(BrickLoad) == []


def test_add_brick_log_keeps_load_rate(loads):
    load = loads.create_load("V", "1", 1000, 500, "2024-02-01")
    load = loads.add_brick_log(load.id, 3000, 700, "2024-02-03")
    assert load.brick_rate == 500
    assert load.brick_quantity == 4
    assert load.total_amount == 500 + 2100
    newest = loads.list_logs(load.id)[0]
    assert newest.brick_rate == 700 and newest.brick_quantity == 3


def test_delete_then_readd_round_trip(loads):
    load = loads.create_load("V", "1", 5000, 500, "2024-02-01")
    loads.add_payment(load.id, 700, "2024-02-02")
    before = loads.get_load(load.id)
    payment = next(log for log in loads.list_logs(load.id) if log.log_type is LogType.PAYMENT)
    loads.delete_log(payment.id)
    after = loads.add_payment(load.id, payment.amount, payment.date)
    assert (after.total_amount, after.brick_quantity, after.amount_paid) == (
        before.total_amount,
        before.brick_quantity,
        before.amount_paid,
    )


def test_random_add_delete_sequence_stays_consistent(loads):
    rng = random.Random(42)
    load = loads.create_load("V", "1", 1000, 500, "2024-02-01")
    for step in range(30):
        logs = loads.list_logs(load.id)
        choice = rng.random()
        if choice < 0.4:
            loads.add_brick_log(load.id, rng.randint(1, 9) * 500, rng.choice([450, 500, 650]), "2024-02-05")
        elif choice < 0.7:
            loads.add_payment(load.id, rng.randint(1, 20) * 100, "2024-02-06")
        elif logs:
            loads.delete_log(rng.choice(logs).id)
        _assert_consistent(loads, load.id)


def test_delete_load_removes_logs(loads, store):
    keep = loads.create_load("Keep", "1", 1000, 500, "2024-02-01")
    gone = loads.create_load("Gone", "2", 1000, 500, "2024-02-01", amount_paid=100)
    loads.delete_load(gone.id)
    assert [ld.id for ld in store.list(BrickLoad)] == [keep.id]
    assert {log.brick_load_id for log in store.list(BrickLoadLog)} == {keep.id}
    with pytest.raises(NotFoundError):
        loads.get_load(gone.id)


def test_delete_missing_log(loads):
    with pytest.raises(NotFoundError):
        loads.delete_log("missing")


def test_search_loads(loads):
    loads.create_load("Rampur", "98765", 1000, 500, "2024-02-01")
    loads.create_load("Sitapur", "12345", 1000, 500, "2024-02-01")
    all_loads = loads.list_loads()
    assert [ld.village_name for ld in loads.search_loads(all_loads, "ram")] == ["Rampur"]
    assert [ld.village_name for ld in loads.search_loads(all_loads, "234")] == ["Sitapur"]


def test_share_message_and_whatsapp_url(loads):
    load = loads.create_load("Rampur", "+91 98765-43210", 5000, 500, "2024-02-01", amount_paid=1000)
    message = loads.share_message(load)
    assert message.startswith("JAI DURGA BRICKS\n\n")
    assert "మొత్తం ఇటుక: 5,000" in message
    assert "మొత్తం డబ్బులు: ₹2,500" in message
    assert "మీరు చెల్లించినవి: ₹1,000" in message
    assert "బాకీ: ₹1,500" in message
    assert message.endswith("Thank you for your business!")

    url = loads.whatsapp_url(load)
    assert url.startswith("https://wa.me/91919876543210?text=")
    assert unquote(url.split("?text=", 1)[1]) == message


@pytest.mark.parametrize("amount", ["inf", "-inf", "nan"])
def test_payment_rejects_non_finite_amounts(loads, amount):
    load = loads.create_load("V", "1", 1000, 500, "2024-02-01")
    with pytest.raises(ValidationError):
        loads.add_payment(load.id, amount, "2024-02-02")
    assert loads.get_load(load.id).amount_paid == 0
    _assert_consistent(loads, load.id)


def test_create_rejects_non_finite_numbers(loads, store):
    with pytest.raises(ValidationError):
        loads.create_load("V", "1", 1000, "nan", "2024-02-01")
    with pytest.raises(ValidationError):
        loads.create_load("V", "1", "inf", 500, "2024-02-01")
    with pytest.raises(ValidationError):
        loads.create_load("V", "1", 1000, 500, "2024-02-01", amount_paid="inf")
    assert store.list(BrickLoad) == []


def _failing_adjust(*args, **kwargs):
    raise sqlite3.OperationalError("disk I/O error")


def test_failed_delete_keeps_log_and_totals(loads, store, monkeypatch):
    load = loads.create_load("V", "1", 5000, 500, "2024-02-01")
    loads.add_payment(load.id, 700, "2024-02-02")
    payment = next(log for log in loads.list_logs(load.id) if log.log_type is LogType.PAYMENT)

    monkeypatch.setattr(store, "_adjust", _failing_adjust)
    with pytest.raises(StoreError):
        loads.delete_log(payment.id)
    monkeypatch.undo()

    assert payment.id in [log.id for log in loads.list_logs(load.id)]
    assert loads.get_load(load.id).amount_paid == 700
    _assert_consistent(loads, load.id)
    # the retry succeeds and reverses the payment exactly once
    assert loads.delete_log(payment.id).amount_paid == 0
    _assert_consistent(loads, load.id)


def test_failed_add_leaves_no_log(loads, store, monkeypatch):
    load = loads.create_load("V", "1", 5000, 500, "2024-02-01")
    monkeypatch.setattr(store, "_adjust", _failing_adjust)
    with pytest.raises(StoreError):
        loads.add_payment(load.id, 700, "2024-02-02")
    with pytest.raises(StoreError):
        loads.add_brick_log(load.id, 1000, 500, "2024-02-02")
    monkeypatch.undo()

    assert len(loads.list_logs(load.id)) == 1
    _assert_consistent(loads, load.id)


def test_failed_create_leaves_nothing_behind(loads, store, monkeypatch):
    monkeypatch.setattr(store, "_adjust", _failing_adjust)
    with pytest.raises(StoreError):
        loads.create_load("V", "1", 5000, 500, "2024-02-01", amount_paid=1000)
    monkeypatch.undo()

    assert loads.list_loads() == []
    assert store.list(BrickLoadLog) == []
    # a retry creates exactly one load
    load = loads.create_load("V", "1", 5000, 500, "2024-02-01", amount_paid=1000)
    assert [ld.id for ld in loads.list_loads()] == [load.id]
    _assert_consistent(loads, load.id)
