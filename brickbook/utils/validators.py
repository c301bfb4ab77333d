from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date

from dateutil import parser

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ValidationError(Exception):
    """Domain validation error."""

    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


def require_text(value: str | None, name: str) -> str:
    """Return the stripped value, or raise if it is missing or blank."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{name} is required")
    return text


def require_positive(value: float, name: str) -> None:
    """Ensure value is strictly positive.

    Args:
        value: Numeric value to validate.
        name: Field name for error message.

    Raises:
        ValidationError: If value <= 0.
    """
    if not value > 0:
        raise ValidationError(f"{name} must be positive, got {value}")


def require_non_negative(value: float, name: str) -> None:
    """Ensure value is non-negative."""
    if not value >= 0:
        raise ValidationError(f"{name} must be >= 0, got {value}")


def parse_amount(value: str | float | int | None, name: str) -> float:
    """Parse a form amount; blank input counts as missing."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a finite number, got {value!r}")
    return number


def parse_whole_amount(value: str | float | int | None, name: str) -> int:
    """Parse a form amount that must be whole rupees."""
    number = parse_amount(value, name)
    if not number.is_integer():
        raise ValidationError(f"{name} must be whole rupees, got {value!r}")
    return int(number)


def parse_iso_date(value: str) -> date:
    """Parse and validate ISO date (YYYY-MM-DD)."""
    if not DATE_RE.match(value or ""):
        raise ValidationError(f"Date must be YYYY-MM-DD, got {value}")
    try:
        dt = parser.isoparse(value).date()
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {value}") from exc
    return dt


def today_iso() -> str:
    return date.today().isoformat()
