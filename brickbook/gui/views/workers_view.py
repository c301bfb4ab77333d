from __future__ import annotations

from typing import Any

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.gui.state import AddingWorker, InteractionState
from brickbook.gui.views.common import BaseView, rupees_label
from brickbook.gui.views.dialogs import AddWorkerDialog
from brickbook.gui.views.worker_detail import WorkerDetailView
from brickbook.services.ledger import WorkerSummary


class WorkersView(BaseView):  # pragma: no cover - GUI glue
    """Worker list sorted by balance; a click opens the worker's detail view."""

    def __init__(self, master: Any, ctx: AppContext, interaction: InteractionState) -> None:
        super().__init__(master, ctx, interaction)
        self._summaries: list[WorkerSummary] = []
        self._add_section_title(self.t("nav.workers"))

        bar = ctk.CTkFrame(self, fg_color="transparent")
        bar.grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        bar.grid_columnconfigure(0, weight=1)
        self.search = ctk.CTkEntry(bar, placeholder_text=self.t("common.search"))
        self.search.grid(row=0, column=0, sticky="ew", padx=(0, 6))
        self.search.bind("<KeyRelease>", lambda _e: self._render())
        ctk.CTkButton(bar, text=self.t("worker.add"), command=self._on_add).grid(row=0, column=1)

        self.list_frame = ctk.CTkScrollableFrame(self)
        self.list_frame.grid(row=2, column=0, sticky="nsew", padx=12, pady=(6, 12))
        self.list_frame.grid_columnconfigure(0, weight=1)

        self.detail: WorkerDetailView | None = None
        self.refresh()

    def refresh(self) -> None:
        self._load(self.ctx.workers.list_workers_with_balances, self._on_loaded)

    def _on_loaded(self, summaries: list[WorkerSummary]) -> None:
        self._summaries = summaries
        self._render()

    def _render(self) -> None:
        for child in self.list_frame.winfo_children():
            child.destroy()
        shown = self.ctx.workers.search(self._summaries, self.search.get())
        if not shown:
            ctk.CTkLabel(self.list_frame, text=self.t("common.noResults")).grid(row=0, column=0, pady=12)
            return
        for row, summary in enumerate(shown):
            card = ctk.CTkFrame(self.list_frame)
            card.grid(row=row, column=0, sticky="ew", pady=3)
            card.grid_columnconfigure(0, weight=1)
            name = ctk.CTkLabel(card, text=summary.worker.name, font=("Arial", 14, "bold"), anchor="w")
            name.grid(row=0, column=0, sticky="w", padx=10, pady=(6, 0))
            phone = ctk.CTkLabel(card, text=summary.worker.phone, anchor="w")
            phone.grid(row=1, column=0, sticky="w", padx=10, pady=(0, 6))
            rupees_label(card, summary.balance, font=("Arial", 14, "bold")).grid(row=0, column=1, rowspan=2, padx=10)
            for widget in (card, name, phone):
                widget.bind("<Button-1>", lambda _e, wid=summary.worker.id: self._open_detail(wid))

    def _on_add(self) -> None:
        if self._open(AddingWorker()):
            AddWorkerDialog(self, self.ctx, self.interaction, lambda _w: self.refresh())

    def _open_detail(self, worker_id: str) -> None:
        self.list_frame.grid_remove()
        self.detail = WorkerDetailView(self, self.ctx, self.interaction, worker_id, on_close=self._close_detail)
        self.detail.grid(row=2, column=0, sticky="nsew", padx=12, pady=(6, 12))

    def _close_detail(self) -> None:
        if self.detail is not None:
            self.detail.destroy()
            self.detail = None
        self.list_frame.grid()
        self.refresh()

    def open_usage_for(self, worker_id: str, amount: str) -> None:
        """Open a worker with the add-usage form prefilled (from the calculator)."""
        if self.detail is not None:
            self._close_detail()
        self._open_detail(worker_id)
        if self.detail is not None:
            self.detail.add_usage(amount)
