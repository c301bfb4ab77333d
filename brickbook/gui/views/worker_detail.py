from __future__ import annotations

from typing import Any, Callable

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.gui.background import run_in_background
from brickbook.gui.state import AddingUsage, AddingWork, DeleteTarget, InteractionState
from brickbook.gui.views.common import NEGATIVE_COLOR, BaseView, rupees_label
from brickbook.gui.views.dialogs import AddUsageDialog, AddWorkDialog
from brickbook.reports.base import ReportContext
from brickbook.reports.statements import worker_statement
from brickbook.services.ledger import USAGE_FILTER, LedgerEntry, filter_records, merge_timeline
from brickbook.services.rates import FORM_WORK_TYPES
from brickbook.services.workers_service import WorkerLedger
from brickbook.utils.text import format_date, format_rupees


class WorkerDetailView(BaseView):  # pragma: no cover - GUI glue
    def __init__(
        self,
        master: Any,
        ctx: AppContext,
        interaction: InteractionState,
        worker_id: str,
        on_close: Callable[[], None],
    ) -> None:
        super().__init__(master, ctx, interaction)
        self.worker_id = worker_id
        self.on_close = on_close
        self.ledger: WorkerLedger | None = None

        self.header = ctk.CTkFrame(self)
        self.header.grid(row=0, column=0, sticky="ew", pady=(0, 6))
        self.header.grid_columnconfigure(1, weight=1)

        actions = ctk.CTkFrame(self, fg_color="transparent")
        actions.grid(row=1, column=0, sticky="ew", pady=6)
        ctk.CTkButton(actions, text=self.t("tab.addTodayWork"), command=self._on_add_work).pack(side="left", padx=(0, 6))
        ctk.CTkButton(actions, text=self.t("tab.addUsage"), command=lambda: self.add_usage(None)).pack(side="left", padx=6)

        self._filter_labels = {self.t("common.all"): "", self.t("tab.usage"): USAGE_FILTER}
        self._filter_labels.update({self.t(f"work.{wt.value}"): wt.value for wt in FORM_WORK_TYPES})
        self.filter_var = ctk.StringVar(value=self.t("common.all"))
        ctk.CTkOptionMenu(
            actions, values=list(self._filter_labels), variable=self.filter_var, command=lambda _v: self._render()
        ).pack(side="left", padx=6)
        self.date_filter = ctk.CTkEntry(actions, placeholder_text=self.t("common.date"), width=110)
        self.date_filter.pack(side="left", padx=6)
        self.date_filter.bind("<KeyRelease>", lambda _e: self._render())
        ctk.CTkButton(actions, text=self.t("common.resetFilters"), fg_color="gray60", command=self._reset_filters).pack(
            side="left", padx=6
        )
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
        self._load(lambda: self.ctx.workers.worker_ledger(self.worker_id), self._on_loaded)

    def _on_loaded(self, ledger: WorkerLedger) -> None:
        self.ledger = ledger
        self._render_header()
        self._render()

    def _render_header(self) -> None:
        for child in self.header.winfo_children():
            child.destroy()
        ledger = self.ledger
        if ledger is None:
            return
        ctk.CTkButton(self.header, text=self.t("common.back"), width=70, command=self.on_close).grid(
            row=0, column=0, rowspan=2, padx=8, pady=6
        )
        ctk.CTkLabel(self.header, text=ledger.worker.name, font=("Arial", 16, "bold"), anchor="w").grid(
            row=0, column=1, sticky="w"
        )
        info = ledger.worker.phone
        if ledger.worker.initial_debt:
            info += f"   {self.t('worker.debt')}: {format_rupees(ledger.worker.initial_debt)}"
        ctk.CTkLabel(self.header, text=info, anchor="w").grid(row=1, column=1, sticky="w")
        totals = f"{self.t('tab.totalWork')}: {format_rupees(ledger.total_earned)}   {self.t('tab.usage')}: {format_rupees(ledger.total_taken)}"
        ctk.CTkLabel(self.header, text=totals).grid(row=0, column=2, padx=8)
        rupees_label(self.header, ledger.balance, font=("Arial", 16, "bold")).grid(row=1, column=2, padx=8)
        ctk.CTkButton(
            self.header, text=self.t("common.removeUser"), fg_color=NEGATIVE_COLOR, command=self._on_delete_worker
        ).grid(row=0, column=3, rowspan=2, padx=8)

    def _render(self) -> None:
        for child in self.rows.winfo_children():
            child.destroy()
        if self.ledger is None:
            return
        work, usage = filter_records(
            self.ledger.work_records,
            self.ledger.usage_records,
            date=self.date_filter.get().strip() or None,
            work_type=self._filter_labels.get(self.filter_var.get()) or None,
        )
        entries = merge_timeline(work, usage)
        if not entries:
            ctk.CTkLabel(self.rows, text=self.t("common.noResults")).grid(row=0, column=0, columnspan=4, pady=12)
            return
        for row, entry in enumerate(entries):
            self._render_entry(row, entry)

    def _render_entry(self, row: int, entry: LedgerEntry) -> None:
        ctk.CTkLabel(self.rows, text=format_date(entry.date), width=80).grid(row=row, column=0, padx=4, pady=2)
        if entry.kind == "work":
            label = self.t(f"work.{entry.record.work_type.value}")
            if entry.record.brick_count:
                label += f" ({entry.record.brick_count})"
            if entry.record.is_half_day:
                label += f" - {self.t('common.halfDay')}"
            if entry.record.is_driver:
                label += f" - {self.t('common.driver')}"
        else:
            label = self.t("tab.usage")
        ctk.CTkLabel(self.rows, text=label, anchor="w").grid(row=row, column=1, sticky="w", padx=4)
        rupees_label(self.rows, entry.signed_amount).grid(row=row, column=2, padx=4)
        ctk.CTkButton(
            self.rows,
            text=self.t("common.delete"),
            width=70,
            fg_color="gray60",
            command=lambda e=entry: self._on_delete_entry(e),
        ).grid(row=row, column=3, padx=4)

    def _reset_filters(self) -> None:
        self.filter_var.set(self.t("common.all"))
        self.date_filter.delete(0, "end")
        self._render()

    def _on_add_work(self) -> None:
        if self._open(AddingWork(self.worker_id)):
            AddWorkDialog(self, self.ctx, self.interaction, self.worker_id, lambda _r: self.refresh())

    def add_usage(self, amount: str | None) -> None:
        if self._open(AddingUsage(self.worker_id, amount)):
            AddUsageDialog(self, self.ctx, self.interaction, self.worker_id, lambda _r: self.refresh(), amount=amount)

    def _on_delete_entry(self, entry: LedgerEntry) -> None:
        if entry.kind == "work":
            target = DeleteTarget("work", entry.record.id)
            message = self.t("common.confirmDeleteWork")
            delete = self.ctx.workers.delete_work_record
        else:
            target = DeleteTarget("usage", entry.record.id)
            message = self.t("common.confirmDeleteUsage")
            delete = self.ctx.workers.delete_usage_record
        self._confirm_delete(
            target, message, lambda: run_in_background(self, lambda: delete(target.record_id), lambda _r: self.refresh())
        )

    def _on_delete_worker(self) -> None:
        target = DeleteTarget("worker", self.worker_id)
        self._confirm_delete(
            target,
            self.t("common.confirmDeleteWorker"),
            lambda: run_in_background(
                self, lambda: self.ctx.workers.delete_worker(self.worker_id), lambda _r: self.on_close()
            ),
        )

    def _on_export(self) -> None:
        def build() -> tuple[Any, ReportContext]:
            ledger = self.ctx.workers.worker_ledger(self.worker_id)
            context = ReportContext(
                title=f"{self.ctx.config.business_name} - {ledger.worker.name}",
                summary={
                    "Phone": ledger.worker.phone,
                    "Earned": f"{ledger.total_earned:,.2f}",
                    "Taken": f"{ledger.total_taken:,.2f}",
                    "Balance": f"{ledger.balance:,.2f}",
                },
            )
            return worker_statement(ledger), context

        self._export(f"worker_{self.worker_id}", self.export_var.get(), build)
