from __future__ import annotations

from datetime import datetime
from typing import Any

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.gui.background import run_in_background
from brickbook.gui.state import InteractionState
from brickbook.gui.views.common import BaseView
from brickbook.io.excel_exporter import ExcelExporter
from brickbook.reports.base import ReportContext
from brickbook.reports.report_factory import EXTENSIONS, ReportFactory
from brickbook.reports.statements import brick_loads_table, workers_summary

REPORTS = ("workers", "brick_loads")


class ReportsView(BaseView):  # pragma: no cover - GUI glue
    def __init__(self, master: Any, ctx: AppContext, interaction: InteractionState) -> None:
        super().__init__(master, ctx, interaction)
        self.factory = ReportFactory(ctx.paths.templates_dir)
        self._add_section_title(self.t("nav.reports"))

        form = ctk.CTkFrame(self, fg_color="transparent")
        form.grid(row=1, column=0, sticky="w", padx=12, pady=6)
        self.report_var = ctk.StringVar(value=REPORTS[0])
        ctk.CTkOptionMenu(form, values=list(REPORTS), variable=self.report_var).grid(row=0, column=0, padx=6)
        self.type_var = ctk.StringVar(value="html")
        ctk.CTkOptionMenu(form, values=["html", "pdf", "excel"], variable=self.type_var).grid(row=0, column=1, padx=6)
        ctk.CTkButton(form, text=self.t("common.export"), command=self._on_generate).grid(row=0, column=2, padx=6)
        ctk.CTkButton(form, text="Excel (all)", command=self._on_export_all).grid(row=0, column=3, padx=6)

        self.result = ctk.CTkLabel(self, text="", anchor="w")
        self.result.grid(row=2, column=0, sticky="nw", padx=18, pady=6)

    def _stamp(self) -> str:
        return datetime.now().strftime("%Y%m%d_%H%M%S")

    def _on_generate(self) -> None:
        report, report_type = self.report_var.get(), self.type_var.get()
        out = self.ctx.paths.reports_dir / f"{report}_{self._stamp()}{EXTENSIONS[report_type]}"

        def work() -> Any:
            if report == "workers":
                df = workers_summary(self.ctx.workers.list_workers_with_balances())
                title = "Workers"
            else:
                df = brick_loads_table(self.ctx.brick_loads.list_loads())
                title = "Brick loads"
            context = ReportContext(title=f"{self.ctx.config.business_name} - {title}")
            return self.factory.generate(report_type, df, out, context)

        run_in_background(self, work, lambda path: self.result.configure(text=str(path)))

    def _on_export_all(self) -> None:
        out = self.ctx.paths.reports_dir / f"brickbook_{self._stamp()}.xlsx"
        exporter = ExcelExporter(self.ctx.store)
        run_in_background(self, lambda: exporter.export_file(out), lambda path: self.result.configure(text=str(path)))
