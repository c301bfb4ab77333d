"""Pay-rate rules for a day's work.

Amounts are whole rupees. A stored work record keeps the amount computed when
it was entered; later changes to the table below never touch old records.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from brickbook.db.models import WorkType
from brickbook.utils.validators import ValidationError, require_non_negative

BRICKS_PER_UNIT = 1000


@dataclass(frozen=True)
class WorkTypeDefault:
    amount: int
    workers: int
    per_thousand: bool = False
    has_driver: bool = False
    has_half_day: bool = False


WORK_TYPE_DEFAULTS: dict[WorkType, WorkTypeDefault] = {
    WorkType.KUNDI: WorkTypeDefault(amount=400, workers=3),
    WorkType.KUNDI_DRIVER: WorkTypeDefault(amount=500, workers=1),
    WorkType.BRICK_CARRY: WorkTypeDefault(amount=220, workers=1, per_thousand=True),
    WorkType.BRICK_BAKING: WorkTypeDefault(amount=1200, workers=5),
    WorkType.BRICK_LOAD_TRACTOR: WorkTypeDefault(amount=250, workers=5, has_driver=True),
    WorkType.BRICK_LOAD_VAN: WorkTypeDefault(amount=300, workers=5, has_driver=True),
    WorkType.TOP_WORK: WorkTypeDefault(amount=500, workers=1, has_half_day=True),
}

KUNDI_DRIVER_AMOUNT = 500
TRACTOR_DRIVER_AMOUNT = 500
VAN_DRIVER_AMOUNT = 600

# Work types offered by the add-work form; kundi driver is chosen through the kundi driver toggle.
FORM_WORK_TYPES = (
    WorkType.KUNDI,
    WorkType.BRICK_CARRY,
    WorkType.BRICK_BAKING,
    WorkType.BRICK_LOAD_TRACTOR,
    WorkType.BRICK_LOAD_VAN,
    WorkType.TOP_WORK,
)

DRIVER_WORK_TYPES = (WorkType.KUNDI, WorkType.BRICK_LOAD_TRACTOR, WorkType.BRICK_LOAD_VAN)


def calculate_amount(
    work_type: WorkType | str,
    *,
    is_driver: bool = False,
    brick_count: int = BRICKS_PER_UNIT,
    half_day: bool = False,
) -> int:
    """Return the payable amount for one work entry."""
    wt = WorkType(work_type)
    default = WORK_TYPE_DEFAULTS[wt]
    if wt is WorkType.KUNDI:
        return KUNDI_DRIVER_AMOUNT if is_driver else default.amount
    if wt is WorkType.BRICK_CARRY:
        return math.floor(brick_count / BRICKS_PER_UNIT * default.amount)
    if wt is WorkType.BRICK_LOAD_TRACTOR:
        return TRACTOR_DRIVER_AMOUNT if is_driver else default.amount
    if wt is WorkType.BRICK_LOAD_VAN:
        return VAN_DRIVER_AMOUNT if is_driver else default.amount
    if wt is WorkType.TOP_WORK:
        return default.amount // 2 if half_day else default.amount
    return default.amount


class WorkEntry:
    """State of the add-work form.

    Every change of type or modifier recomputes ``amount`` from the current
    values; :meth:`override_amount` replaces it until the next change.
    """

    def __init__(self, work_type: WorkType | str = WorkType.KUNDI) -> None:
        self.work_type = WorkType(work_type)
        self.is_driver = False
        self.brick_count: Optional[int] = BRICKS_PER_UNIT
        self.half_day = False
        self.amount = 0
        self._recalculate()

    def _recalculate(self) -> None:
        if self.brick_count is None and self.work_type is WorkType.BRICK_CARRY:
            self.amount = 0
            return
        self.amount = calculate_amount(
            self.work_type,
            is_driver=self.is_driver,
            brick_count=self.brick_count or 0,
            half_day=self.half_day,
        )

    def select_work_type(self, work_type: WorkType | str) -> int:
        self.work_type = WorkType(work_type)
        self._recalculate()
        return self.amount

    def set_driver(self, is_driver: bool) -> int:
        self.is_driver = bool(is_driver)
        self._recalculate()
        return self.amount

    def set_brick_count(self, brick_count: int) -> int:
        require_non_negative(brick_count, "brick count")
        self.brick_count = int(brick_count)
        self._recalculate()
        return self.amount

    def enter_brick_count(self, text: str) -> int:
        """Take the brick-count field as typed; anything but digits clears the count."""
        text = (text or "").strip()
        if text.isdecimal():
            return self.set_brick_count(int(text))
        self.brick_count = None
        self._recalculate()
        return self.amount

    def set_half_day(self, half_day: bool) -> int:
        self.half_day = bool(half_day)
        self._recalculate()
        return self.amount

    def override_amount(self, amount: float) -> None:
        """Replace the computed amount by hand.

        Only whole, non-negative rupees are accepted; fractions raise
        :class:`ValidationError` rather than being rounded.
        """
        require_non_negative(amount, "amount")
        if not float(amount).is_integer():
            raise ValidationError(f"amount must be whole rupees, got {amount}")
        self.amount = int(amount)

    def missing_fields(self) -> list[str]:
        """Modifiers the current work type needs but the form has not got."""
        if self.work_type is WorkType.BRICK_CARRY and self.brick_count is None:
            return ["brick count"]
        return []

    def reset(self) -> None:
        self.work_type = WorkType.KUNDI
        self.is_driver = False
        self.brick_count = BRICKS_PER_UNIT
        self.half_day = False
        self._recalculate()

    def record_fields(self) -> dict[str, Any]:
        """Type-specific attributes stored on the record; the rest stay unset."""
        return {
            "is_driver": self.is_driver if self.work_type in DRIVER_WORK_TYPES else None,
            "brick_count": self.brick_count if self.work_type is WorkType.BRICK_CARRY else None,
            "is_half_day": self.half_day if self.work_type is WorkType.TOP_WORK else None,
        }
