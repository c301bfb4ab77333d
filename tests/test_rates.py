from __future__ import annotations

import pytest

from brickbook.db.models import WorkType
from brickbook.services.rates import WORK_TYPE_DEFAULTS, WorkEntry, calculate_amount
from brickbook.utils.validators import ValidationError


@pytest.mark.parametrize(
    "work_type, kwargs, expected",
    [
        (WorkType.KUNDI, {}, 400),
        (WorkType.KUNDI, {"is_driver": True}, 500),
        (WorkType.KUNDI_DRIVER, {}, 500),
        (WorkType.BRICK_CARRY, {"brick_count": 1000}, 220),
        (WorkType.BRICK_CARRY, {"brick_count": 2500}, 550),
        (WorkType.BRICK_CARRY, {"brick_count": 1234}, 271),
        (WorkType.BRICK_CARRY, {"brick_count": 0}, 0),
        (WorkType.BRICK_BAKING, {}, 1200),
        (WorkType.BRICK_LOAD_TRACTOR, {}, 250),
        (WorkType.BRICK_LOAD_TRACTOR, {"is_driver": True}, 500),
        (WorkType.BRICK_LOAD_VAN, {}, 300),
        (WorkType.BRICK_LOAD_VAN, {"is_driver": True}, 600),
        (WorkType.TOP_WORK, {}, 500),
        (WorkType.TOP_WORK, {"half_day": True}, 250),
    ],
)
def test_rate_table(work_type, kwargs, expected):
    assert calculate_amount(work_type, **kwargs) == expected


def test_modifiers_ignored_for_other_types():
    assert calculate_amount("brickBaking", is_driver=True, half_day=True, brick_count=9000) == 1200
    assert calculate_amount("topWork", is_driver=True) == 500


def test_unknown_work_type_rejected():
    with pytest.raises(ValueError):
        calculate_amount("digging")


def test_every_type_has_a_default():
    assert set(WORK_TYPE_DEFAULTS) == set(WorkType)


def test_work_entry_recomputes_from_current_modifiers():
    entry = WorkEntry()
    assert entry.amount == 400
    assert entry.set_driver(True) == 500
    # switching type keeps the driver flag and applies it to the new type
    assert entry.select_work_type(WorkType.BRICK_LOAD_VAN) == 600
    assert entry.set_driver(False) == 300
    entry.select_work_type(WorkType.BRICK_CARRY)
    assert entry.set_brick_count(3000) == 660
    entry.select_work_type(WorkType.TOP_WORK)
    assert entry.set_half_day(True) == 250


def test_override_lasts_until_next_change():
    entry = WorkEntry(WorkType.BRICK_BAKING)
    entry.override_amount(999)
    assert entry.amount == 999
    entry.select_work_type(WorkType.BRICK_BAKING)
    assert entry.amount == 1200


def test_override_rejects_negative():
    entry = WorkEntry()
    with pytest.raises(ValidationError):
        entry.override_amount(-1)
    with pytest.raises(ValidationError):
        entry.set_brick_count(-5)


def test_record_fields_only_for_relevant_types():
    entry = WorkEntry(WorkType.BRICK_CARRY)
    entry.set_brick_count(2000)
    entry.set_driver(True)
    assert entry.record_fields() == {"is_driver": None, "brick_count": 2000, "is_half_day": None}

    entry.select_work_type(WorkType.BRICK_LOAD_TRACTOR)
    assert entry.record_fields() == {"is_driver": True, "brick_count": None, "is_half_day": None}

    entry.select_work_type(WorkType.TOP_WORK)
    assert entry.record_fields() == {"is_driver": None, "brick_count": None, "is_half_day": False}


def test_reset():
    entry = WorkEntry(WorkType.TOP_WORK)
    entry.set_half_day(True)
    entry.reset()
    assert entry.work_type is WorkType.KUNDI
    assert entry.amount == 400
    assert entry.is_driver is False and entry.half_day is False


def test_override_takes_whole_rupees_only():
    entry = WorkEntry(WorkType.BRICK_BAKING)
    for bad in (12.5, float("inf"), float("nan")):
        with pytest.raises(ValidationError):
            entry.override_amount(bad)
    assert entry.amount == 1200
    entry.override_amount(12.0)
    assert entry.amount == 12 and isinstance(entry.amount, int)


@pytest.mark.parametrize("typed", ["", "  ", "abc", "2.5", "-10"])
def test_unreadable_brick_count_clears_the_amount(typed):
    entry = WorkEntry(WorkType.BRICK_CARRY)
    entry.set_brick_count(3000)
    assert entry.enter_brick_count(typed) == 0
    assert entry.brick_count is None
    assert entry.missing_fields() == ["brick count"]
    # other work types do not need a brick count
    entry.select_work_type(WorkType.KUNDI)
    assert entry.missing_fields() == []
    assert entry.amount == 400


def test_typed_brick_count():
    entry = WorkEntry(WorkType.BRICK_CARRY)
    assert entry.enter_brick_count(" 2000 ") == 440
    assert entry.brick_count == 2000
    assert entry.missing_fields() == []
