from __future__ import annotations

import logging
import webbrowser
from typing import Any, Callable

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.db.models import BrickLoad, BrickLoadLog, LogType
from brickbook.gui.background import run_in_background
from brickbook.gui.state import AddingBrickLoad, AddingBrickLog, AddingPayment, DeleteTarget, InteractionState
from brickbook.gui.views.common import NEGATIVE_COLOR, BaseView, rupees_label
from brickbook.gui.views.dialogs import AddBrickLoadDialog, AddBrickLogDialog, AddPaymentDialog
from brickbook.reports.base import ReportContext
from brickbook.reports.statements import brick_load_statement, brick_load_summary
from brickbook.services.rates import BRICKS_PER_UNIT
from brickbook.utils.text import format_date, format_number, format_rupees

logger = logging.getLogger(__name__)


class BrickLoadsView(BaseView):  # pragma: no cover - GUI glue
    def __init__(self, master: Any, ctx: AppContext, interaction: InteractionState) -> None:
        super().__init__(master, ctx, interaction)
        self._loads: list[BrickLoad] = []
        self._add_section_title(self.t("brickLoad.title"))

        bar = ctk.CTkFrame(self, fg_color="transparent")
        bar.grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        bar.grid_columnconfigure(0, weight=1)
        self.search = ctk.CTkEntry(bar, placeholder_text=self.t("brickLoad.search"))
        self.search.grid(row=0, column=0, sticky="ew", padx=(0, 6))
        self.search.bind("<KeyRelease>", lambda _e: self._render())
        ctk.CTkButton(bar, text=self.t("brickLoad.add"), command=self._on_add).grid(row=0, column=1)

        self.list_frame = ctk.CTkScrollableFrame(self)
        self.list_frame.grid(row=2, column=0, sticky="nsew", padx=12, pady=(6, 12))
        self.list_frame.grid_columnconfigure(0, weight=1)
        self.detail: BrickLoadDetailView | None = None
        self.refresh()

    def refresh(self) -> None:
        self._load(self.ctx.brick_loads.list_loads, self._on_loaded)

    def _on_loaded(self, loads: list[BrickLoad]) -> None:
        self._loads = loads
        self._render()

    def _render(self) -> None:
        for child in self.list_frame.winfo_children():
            child.destroy()
        shown = self.ctx.brick_loads.search_loads(self._loads, self.search.get())
        if not shown:
            ctk.CTkLabel(self.list_frame, text=self.t("common.noResults")).grid(row=0, column=0, pady=12)
            return
        for row, load in enumerate(shown):
            card = ctk.CTkFrame(self.list_frame)
            card.grid(row=row, column=0, sticky="ew", pady=3)
            card.grid_columnconfigure(0, weight=1)
            title = ctk.CTkLabel(card, text=load.village_name, font=("Arial", 14, "bold"), anchor="w")
            title.grid(row=0, column=0, sticky="w", padx=10, pady=(6, 0))
            info = ctk.CTkLabel(
                card,
                text=f"{load.phone_number}   {format_date(load.date)}   "
                f"{self.t('brickLoad.totalBricks')}: {format_number(round(load.brick_quantity * BRICKS_PER_UNIT))}",
                anchor="w",
            )
            info.grid(row=1, column=0, sticky="w", padx=10, pady=(0, 6))
            rupees_label(card, load.due, font=("Arial", 14, "bold")).grid(row=0, column=1, rowspan=2, padx=10)
            ctk.CTkButton(
                card, text=self.t("brickLoad.share"), width=90, command=lambda ld=load: self._share(ld)
            ).grid(row=0, column=2, rowspan=2, padx=(0, 10))
            for widget in (card, title, info):
                widget.bind("<Button-1>", lambda _e, lid=load.id: self._open_detail(lid))

    def _share(self, load: BrickLoad) -> None:
        url = self.ctx.brick_loads.whatsapp_url(load)
        logger.info("Opening WhatsApp share for load %s", load.id)
        webbrowser.open(url)

    def _on_add(self) -> None:
        if self._open(AddingBrickLoad()):
            AddBrickLoadDialog(self, self.ctx, self.interaction, lambda _l: self.refresh())

    def _open_detail(self, load_id: str) -> None:
        self.list_frame.grid_remove()
        self.detail = BrickLoadDetailView(
            self, self.ctx, self.interaction, load_id, on_close=self._close_detail, on_share=self._share
        )
        self.detail.grid(row=2, column=0, sticky="nsew", padx=12, pady=(6, 12))

    def _close_detail(self) -> None:
        if self.detail is not None:
            self.detail.destroy()
            self.detail = None
        self.list_frame.grid()
        self.refresh()


class BrickLoadDetailView(BaseView):  # pragma: no cover - GUI glue
    def __init__(
        self,
        master: Any,
        ctx: AppContext,
        interaction: InteractionState,
        load_id: str,
        on_close: Callable[[], None],
        on_share: Callable[[BrickLoad], None],
    ) -> None:
        super().__init__(master, ctx, interaction)
        self.load_id = load_id
        self.on_close = on_close
        self.on_share = on_share
        self.load: BrickLoad | None = None

        self.header = ctk.CTkFrame(self)
        self.header.grid(row=0, column=0, sticky="ew", pady=(0, 6))
        self.header.grid_columnconfigure(1, weight=1)

        actions = ctk.CTkFrame(self, fg_color="transparent")
        actions.grid(row=1, column=0, sticky="ew", pady=6)
        ctk.CTkButton(actions, text=self.t("brickLoad.addBrickLog"), command=self._on_add_bricks).pack(
            side="left", padx=(0, 6)
        )
        ctk.CTkButton(actions, text=self.t("brickLoad.addPayment"), command=self._on_add_payment).pack(
            side="left", padx=6
        )
        ctk.CTkButton(
            actions, text=self.t("common.delete"), fg_color=NEGATIVE_COLOR, command=self._on_delete_load
        ).pack(side="right", padx=6)
        self.export_var = ctk.StringVar(value="pdf")
        ctk.CTkButton(actions, text=self.t("common.export"), width=80, command=self._on_export).pack(side="right", padx=6)
        ctk.CTkOptionMenu(actions, values=["html", "pdf", "excel"], variable=self.export_var, width=80).pack(
            side="right", padx=6
        )

        self.rows = ctk.CTkScrollableFrame(self)
        self.rows.grid(row=2, column=0, sticky="nsew")
        self.rows.grid_columnconfigure(1, weight=1)
        self.refresh()

    def refresh(self) -> None:
        self._load(
            lambda: (self.ctx.brick_loads.get_load(self.load_id), self.ctx.brick_loads.list_logs(self.load_id)),
            self._on_loaded,
        )

    def _on_loaded(self, result: tuple[BrickLoad, list[BrickLoadLog]]) -> None:
        self.load, logs = result
        self._render_header()
        self._render_logs(logs)

    def _render_header(self) -> None:
        for child in self.header.winfo_children():
            child.destroy()
        load = self.load
        if load is None:
            return
        ctk.CTkButton(self.header, text=self.t("common.back"), width=70, command=self.on_close).grid(
            row=0, column=0, rowspan=2, padx=8, pady=6
        )
        ctk.CTkLabel(self.header, text=load.village_name, font=("Arial", 16, "bold"), anchor="w").grid(
            row=0, column=1, sticky="w"
        )
        ctk.CTkLabel(self.header, text=f"{load.phone_number}   {format_date(load.date)}", anchor="w").grid(
            row=1, column=1, sticky="w"
        )
        summary = (
            f"{self.t('brickLoad.totalBricks')}: {format_number(round(load.brick_quantity * BRICKS_PER_UNIT))}   "
            f"{self.t('brickLoad.totalAmount')}: {format_rupees(load.total_amount)}   "
            f"{self.t('brickLoad.paid')}: {format_rupees(load.amount_paid)}"
        )
        ctk.CTkLabel(self.header, text=summary).grid(row=0, column=2, padx=8)
        due = ctk.CTkFrame(self.header, fg_color="transparent")
        due.grid(row=1, column=2, padx=8)
        ctk.CTkLabel(due, text=f"{self.t('brickLoad.due')}:").pack(side="left")
        rupees_label(due, load.due, font=("Arial", 16, "bold")).pack(side="left", padx=(4, 0))
        ctk.CTkButton(self.header, text=self.t("brickLoad.share"), width=90, command=lambda: self.on_share(load)).grid(
            row=0, column=3, rowspan=2, padx=8
        )

    def _render_logs(self, logs: list[BrickLoadLog]) -> None:
        for child in self.rows.winfo_children():
            child.destroy()
        if not logs:
            ctk.CTkLabel(self.rows, text=self.t("common.noResults")).grid(row=0, column=0, columnspan=4, pady=12)
            return
        for row, log in enumerate(logs):
            ctk.CTkLabel(self.rows, text=format_date(log.date), width=80).grid(row=row, column=0, padx=4, pady=2)
            if LogType(log.log_type) is LogType.BRICK:
                bricks = format_number(round((log.brick_quantity or 0) * BRICKS_PER_UNIT))
                text = f"{self.t('brickLoad.quantity')}: {bricks} × {format_rupees(log.brick_rate)}"
                amount = log.amount
            else:
                text = self.t("brickLoad.paid")
                amount = -log.amount
            ctk.CTkLabel(self.rows, text=text, anchor="w").grid(row=row, column=1, sticky="w", padx=4)
            rupees_label(self.rows, amount).grid(row=row, column=2, padx=4)
            ctk.CTkButton(
                self.rows,
                text=self.t("brickLoad.deleteLog"),
                width=90,
                fg_color="gray60",
                command=lambda lid=log.id: self._on_delete_log(lid),
            ).grid(row=row, column=3, padx=4)

    def _on_add_bricks(self) -> None:
        rate = self.load.brick_rate if self.load else 0.0
        if self._open(AddingBrickLog(self.load_id)):
            AddBrickLogDialog(self, self.ctx, self.interaction, self.load_id, rate, lambda _l: self.refresh())

    def _on_add_payment(self) -> None:
        if self._open(AddingPayment(self.load_id)):
            AddPaymentDialog(self, self.ctx, self.interaction, self.load_id, lambda _l: self.refresh())

    def _on_delete_log(self, log_id: str) -> None:
        self._confirm_delete(
            DeleteTarget("brick_log", log_id),
            self.t("brickLoad.deleteLog"),
            lambda: run_in_background(
                self, lambda: self.ctx.brick_loads.delete_log(log_id), lambda _l: self.refresh()
            ),
        )

    def _on_delete_load(self) -> None:
        self._confirm_delete(
            DeleteTarget("brick_load", self.load_id),
            self.t("common.confirmDelete"),
            lambda: run_in_background(
                self, lambda: self.ctx.brick_loads.delete_load(self.load_id), lambda _r: self.on_close()
            ),
        )

    def _on_export(self) -> None:
        def build() -> tuple[Any, ReportContext]:
            load = self.ctx.brick_loads.get_load(self.load_id)
            logs = self.ctx.brick_loads.list_logs(self.load_id)
            context = ReportContext(
                title=f"{self.ctx.config.business_name} - {load.village_name}",
                summary=brick_load_summary(load),
            )
            return brick_load_statement(load, logs), context

        self._export(f"brick_load_{self.load_id}", self.export_var.get(), build)
