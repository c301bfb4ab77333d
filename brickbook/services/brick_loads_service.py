from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote

from brickbook.db.gateway import RecordStore
from brickbook.db.models import BrickLoad, BrickLoadLog, LogType
from brickbook.services.common import BaseService
from brickbook.services.ledger import (
    LoadTotals,
    brick_amount,
    bricks_to_units,
    due_balance,
    log_totals,
    totals_agree,
)
from brickbook.services.rates import BRICKS_PER_UNIT
from brickbook.utils.text import digits_only, format_number, matches_query
from brickbook.utils.validators import parse_amount, parse_iso_date, require_non_negative, require_positive, require_text

logger = logging.getLogger(__name__)

WHATSAPP_URL = "https://wa.me/{country}{phone}?text={text}"


@dataclass(frozen=True)
class Reconciliation:
    load: BrickLoad
    totals: LoadTotals

    @property
    def consistent(self) -> bool:
        return totals_agree(self.load, self.totals)


class BrickLoadsService(BaseService):
    """Brick-load sales: the load header keeps running totals of its logs."""

    def __init__(self, store: RecordStore, business_name: str = "JAI DURGA BRICKS", country_code: str = "91") -> None:
        super().__init__(store)
        self.business_name = business_name
        self.country_code = country_code

    def create_load(
        self,
        village_name: str,
        phone_number: str,
        bricks: str | float,
        rate: str | float,
        date: str,
        amount_paid: str | float | None = None,
    ) -> BrickLoad:
        """Create a load with its first brick log and, when given, an initial payment.

        The load and its logs are stored in one step, so a failed save leaves nothing behind.
        """
        village = require_text(village_name, "village name")
        phone = require_text(phone_number, "phone number")
        logs = [self._brick_log("", bricks, rate, date)]
        if amount_paid not in (None, ""):
            paid = parse_amount(amount_paid, "amount paid")
            require_non_negative(paid, "amount paid")
            if paid > 0:
                logs.append(self._payment_log("", paid, date))

        load = self.store.create_brick_load(
            BrickLoad(id=None, village_name=village, phone_number=phone, date=date, brick_rate=logs[0].brick_rate or 0.0),
            logs,
        )
        logger.info("Brick load %s created for %s", load.id, village)
        return load

    def list_loads(self) -> list[BrickLoad]:
        return self.store.list(BrickLoad)

    @staticmethod
    def search_loads(loads: list[BrickLoad], query: str | None) -> list[BrickLoad]:
        return [load for load in loads if matches_query(query, load.village_name, load.phone_number)]

    def get_load(self, load_id: str) -> BrickLoad:
        return self.store.get(BrickLoad, load_id)

    def list_logs(self, load_id: str) -> list[BrickLoadLog]:
        return self.store.list(BrickLoadLog, owner_id=load_id)

    @staticmethod
    def _brick_log(load_id: str, bricks: str | float, rate: str | float, date: str) -> BrickLoadLog:
        parse_iso_date(date)
        count = parse_amount(bricks, "bricks")
        require_positive(count, "bricks")
        price = parse_amount(rate, "rate")
        require_non_negative(price, "rate")
        return BrickLoadLog(
            id=None,
            brick_load_id=load_id,
            date=date,
            log_type=LogType.BRICK,
            amount=brick_amount(count, price),
            brick_quantity=bricks_to_units(count),
            brick_rate=price,
        )

    @staticmethod
    def _payment_log(load_id: str, amount: str | float, date: str) -> BrickLoadLog:
        parse_iso_date(date)
        value = parse_amount(amount, "amount")
        require_positive(value, "amount")
        return BrickLoadLog(id=None, brick_load_id=load_id, date=date, log_type=LogType.PAYMENT, amount=value)

    def add_brick_log(self, load_id: str, bricks: str | float, rate: str | float, date: str) -> BrickLoad:
        """Record another delivery of ``bricks`` at ``rate`` per thousand.

        The load's rate is left as it was; each log keeps its own rate.
        """
        return self.store.add_brick_load_log(self._brick_log(load_id, bricks, rate, date))

    def add_payment(self, load_id: str, amount: str | float, date: str) -> BrickLoad:
        return self.store.add_brick_load_log(self._payment_log(load_id, amount, date))

    def delete_log(self, log_id: str) -> BrickLoad:
        """Delete one log and take its contribution back out of the load."""
        load = self.store.delete_brick_load_log(log_id)
        logger.info("Log %s removed from load %s", log_id, load.id)
        return load

    def delete_load(self, load_id: str) -> None:
        self.store.get(BrickLoad, load_id)
        removed = self.store.delete_owned(BrickLoadLog, load_id)
        self.store.delete(BrickLoad, load_id)
        logger.info("Brick load %s deleted with %d logs", load_id, removed)

    def reconcile(self, load_id: str) -> Reconciliation:
        """Compare the stored running totals with a recomputation from the logs."""
        result = Reconciliation(load=self.get_load(load_id), totals=log_totals(self.list_logs(load_id)))
        if not result.consistent:
            logger.warning(
                "Brick load %s totals drifted: stored %s/%s, logs %s/%s",
                load_id,
                result.load.total_amount,
                result.load.amount_paid,
                result.totals.brick_total,
                result.totals.payment_total,
            )
        return result

    # Sharing
    def share_message(self, load: BrickLoad) -> str:
        return (
            f"{self.business_name}\n\n"
            f"మొత్తం ఇటుక: {format_number(round(load.brick_quantity * BRICKS_PER_UNIT))}\n"
            f"మొత్తం డబ్బులు: ₹{format_number(load.total_amount)}\n"
            f"మీరు చెల్లించినవి: ₹{format_number(load.amount_paid)}\n"
            f"బాకీ: ₹{format_number(due_balance(load))}\n\n"
            "Thank you for your business!"
        )

    def whatsapp_url(self, load: BrickLoad) -> str:
        return WHATSAPP_URL.format(
            country=self.country_code,
            phone=digits_only(load.phone_number),
            text=quote(self.share_message(load), safe=""),
        )
