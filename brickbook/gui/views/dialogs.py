from __future__ import annotations

from typing import Any, Callable

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.gui.state import InteractionState
from brickbook.gui.views.common import FormDialog
from brickbook.services.rates import DRIVER_WORK_TYPES, FORM_WORK_TYPES, WORK_TYPE_DEFAULTS, WorkEntry
from brickbook.utils.validators import parse_amount, today_iso

Saved = Callable[[Any], None]


class _ContextDialog(FormDialog):  # pragma: no cover - GUI glue
    def __init__(
        self, master: Any, ctx: AppContext, interaction: InteractionState, title_key: str, on_saved: Saved
    ) -> None:
        super().__init__(master, ctx.translator.t(title_key), interaction, ctx.translator.t)
        self.ctx = ctx
        self._saved_callback = on_saved

    def on_saved(self, result: Any) -> None:
        self._saved_callback(result)


class AddWorkerDialog(_ContextDialog):  # pragma: no cover - GUI glue
    def __init__(self, master: Any, ctx: AppContext, interaction: InteractionState, on_saved: Saved) -> None:
        super().__init__(master, ctx, interaction, "worker.add", on_saved)
        self.name = self.add_entry(self.t("worker.name"))
        self.phone = self.add_entry(self.t("worker.phone"))
        self.debt = self.add_entry(self.t("worker.debt"))

    def submit(self) -> Callable[[], Any]:
        name, phone, debt = self.name.get(), self.phone.get(), self.debt.get()
        return lambda: self.ctx.workers.create_worker(name, phone, debt or None)


class AddWorkDialog(_ContextDialog):  # pragma: no cover - GUI glue
    """Work form; the amount follows the work type and modifiers until edited by hand."""

    def __init__(
        self, master: Any, ctx: AppContext, interaction: InteractionState, worker_id: str, on_saved: Saved
    ) -> None:
        super().__init__(master, ctx, interaction, "tab.addTodayWork", on_saved)
        self.worker_id = worker_id
        self.entry = WorkEntry()
        self._labels = {self.t(f"work.{wt.value}"): wt for wt in FORM_WORK_TYPES}

        self.type_var = ctk.StringVar(value=self.t(f"work.{self.entry.work_type.value}"))
        type_menu = ctk.CTkOptionMenu(
            self.body, values=list(self._labels), variable=self.type_var, command=self._on_type
        )
        self.add_widget(self.t("common.workType"), type_menu)

        self.driver_var = ctk.BooleanVar(value=False)
        self.driver = ctk.CTkSwitch(self.body, text=self.t("common.driver"), variable=self.driver_var, command=self._on_driver)
        self.add_widget("", self.driver)

        self.brick_count = self.add_entry(self.t("common.brickCount"), str(self.entry.brick_count))
        self.brick_count.bind("<KeyRelease>", self._on_brick_count)

        self.half_day_var = ctk.BooleanVar(value=False)
        self.half_day = ctk.CTkSwitch(
            self.body, text=self.t("common.halfDay"), variable=self.half_day_var, command=self._on_half_day
        )
        self.add_widget("", self.half_day)

        self.amount = self.add_entry(self.t("common.amount"))
        self.date = self.add_entry(self.t("common.date"), today_iso())
        self._refresh()

    def _refresh(self) -> None:
        wt = self.entry.work_type
        default = WORK_TYPE_DEFAULTS[wt]
        self.driver.configure(state="normal" if wt in DRIVER_WORK_TYPES else "disabled")
        self.brick_count.configure(state="normal" if default.per_thousand else "disabled")
        self.half_day.configure(state="normal" if default.has_half_day else "disabled")
        self.amount.delete(0, "end")
        self.amount.insert(0, str(self.entry.amount))

    def _on_type(self, label: str) -> None:
        self.entry.select_work_type(self._labels[label])
        self._refresh()

    def _on_driver(self) -> None:
        self.entry.set_driver(self.driver_var.get())
        self._refresh()

    def _on_half_day(self) -> None:
        self.entry.set_half_day(self.half_day_var.get())
        self._refresh()

    def _on_brick_count(self, _event: Any = None) -> None:
        self.entry.enter_brick_count(self.brick_count.get())
        self._refresh()

    def submit(self) -> Callable[[], Any]:
        amount_text, date = self.amount.get(), self.date.get().strip()
        entry = self.entry

        def work() -> Any:
            amount = parse_amount(amount_text, "amount")
            if amount != entry.amount:
                entry.override_amount(amount)
            return self.ctx.workers.add_work_record(self.worker_id, entry, date)

        return work


class AddUsageDialog(_ContextDialog):  # pragma: no cover - GUI glue
    def __init__(
        self,
        master: Any,
        ctx: AppContext,
        interaction: InteractionState,
        worker_id: str,
        on_saved: Saved,
        amount: str | None = None,
    ) -> None:
        super().__init__(master, ctx, interaction, "tab.addUsage", on_saved)
        self.worker_id = worker_id
        self.amount = self.add_entry(self.t("common.amount"), amount or "")
        self.date = self.add_entry(self.t("common.date"), today_iso())

    def submit(self) -> Callable[[], Any]:
        amount, date = self.amount.get(), self.date.get().strip()
        return lambda: self.ctx.workers.add_usage(self.worker_id, amount, date)


class AddBrickLoadDialog(_ContextDialog):  # pragma: no cover - GUI glue
    def __init__(self, master: Any, ctx: AppContext, interaction: InteractionState, on_saved: Saved) -> None:
        super().__init__(master, ctx, interaction, "brickLoad.add", on_saved)
        self.village = self.add_entry(self.t("brickLoad.village"))
        self.phone = self.add_entry(self.t("worker.phone"))
        self.bricks = self.add_entry(self.t("brickLoad.quantity"))
        self.rate = self.add_entry(self.t("brickLoad.rate"))
        self.paid = self.add_entry(self.t("brickLoad.paid"))
        self.date = self.add_entry(self.t("common.date"), today_iso())

    def submit(self) -> Callable[[], Any]:
        values = (
            self.village.get(),
            self.phone.get(),
            self.bricks.get(),
            self.rate.get(),
            self.date.get().strip(),
            self.paid.get(),
        )
        return lambda: self.ctx.brick_loads.create_load(*values)


class AddBrickLogDialog(_ContextDialog):  # pragma: no cover - GUI glue
    def __init__(
        self, master: Any, ctx: AppContext, interaction: InteractionState, load_id: str, rate: float, on_saved: Saved
    ) -> None:
        super().__init__(master, ctx, interaction, "brickLoad.addBrickLog", on_saved)
        self.load_id = load_id
        self.bricks = self.add_entry(self.t("brickLoad.quantity"))
        self.rate = self.add_entry(self.t("brickLoad.rate"), f"{rate:g}" if rate else "")
        self.date = self.add_entry(self.t("common.date"), today_iso())

    def submit(self) -> Callable[[], Any]:
        bricks, rate, date = self.bricks.get(), self.rate.get(), self.date.get().strip()
        return lambda: self.ctx.brick_loads.add_brick_log(self.load_id, bricks, rate, date)


class AddPaymentDialog(_ContextDialog):  # pragma: no cover - GUI glue
    def __init__(
        self, master: Any, ctx: AppContext, interaction: InteractionState, load_id: str, on_saved: Saved
    ) -> None:
        super().__init__(master, ctx, interaction, "brickLoad.addPayment", on_saved)
        self.load_id = load_id
        self.amount = self.add_entry(self.t("common.amount"))
        self.date = self.add_entry(self.t("common.date"), today_iso())

    def submit(self) -> Callable[[], Any]:
        amount, date = self.amount.get(), self.date.get().strip()
        return lambda: self.ctx.brick_loads.add_payment(self.load_id, amount, date)

