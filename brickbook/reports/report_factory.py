from __future__ import annotations

from pathlib import Path
from typing import Literal

import pandas as pd

from brickbook.reports.base import ReportContext, ReportStrategy
from brickbook.reports.excel_report import ExcelReportStrategy
from brickbook.reports.html_report import HtmlReportStrategy
from brickbook.reports.pdf_report import PdfReportStrategy

ReportType = Literal["html", "pdf", "excel"]

EXTENSIONS: dict[str, str] = {"html": ".html", "pdf": ".pdf", "excel": ".xlsx"}


class ReportFactory:
    def __init__(self, templates_dir: Path | None = None) -> None:
        self._strategies: dict[ReportType, ReportStrategy] = {
            "html": HtmlReportStrategy(templates_dir),
            "pdf": PdfReportStrategy(),
            "excel": ExcelReportStrategy(),
        }

    def generate(self, report_type: ReportType, df: pd.DataFrame, output_path: Path, context: ReportContext) -> Path:
        strategy = self._strategies[report_type]
        return strategy.generate(df, output_path, context)
