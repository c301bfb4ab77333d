from __future__ import annotations

import re

from dateutil import parser


def normalize_for_search(value: str | None) -> str | None:
    if value is None:
        return None
    return value.casefold().strip()


def digits_only(value: str | None) -> str:
    return re.sub(r"\D", "", value or "")


def matches_query(query: str | None, name: str | None, phone: str | None) -> bool:
    """Case-insensitive match on the name, plain substring match on the phone.

    An empty query matches everything.
    """
    q = normalize_for_search(query)
    if not q:
        return True
    return q in (normalize_for_search(name) or "") or q in (phone or "").casefold()


def format_date(value: str | None) -> str:
    """Format ISO ``YYYY-MM-DD`` as ``D/M/YY`` for the lists."""
    if not value:
        return ""
    d = parser.isoparse(value)
    return f"{d.day}/{d.month}/{d.strftime('%y')}"


def format_number(value: float | int | None) -> str:
    """Thousands separators; whole numbers without a fractional part."""
    if value is None:
        return "0"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_rupees(value: float | int | None) -> str:
    amount = value or 0
    if amount < 0:
        return f"-₹{format_number(-amount)}"
    return f"₹{format_number(amount)}"
