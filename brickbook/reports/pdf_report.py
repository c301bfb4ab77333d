from __future__ import annotations

from pathlib import Path

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from brickbook.reports.base import ReportContext, ReportStrategy


class PdfReportStrategy(ReportStrategy):
    """Statement as a PDF table.

    The built-in PDF fonts cover Latin text only, so callers pass English
    column names and plain numbers.
    """

    def generate(self, df: pd.DataFrame, output_path: Path, context: ReportContext) -> Path:
        doc = SimpleDocTemplate(str(output_path), pagesize=A4, title=context.title)
        styles = getSampleStyleSheet()
        elements = [Paragraph(context.title, styles["Title"])]
        if context.filters:
            filters_text = ", ".join(f"{k}: {v}" for k, v in context.filters.items())
            elements.append(Paragraph(filters_text, styles["Normal"]))
        for label, value in context.summary.items():
            elements.append(Paragraph(f"<b>{label}:</b> {value}", styles["Normal"]))
        elements.append(Spacer(1, 12))
        data = [list(df.columns)] + [["" if pd.isna(v) else v for v in row] for row in df.values.tolist()]
        table = Table(data, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f0f0f0")),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                ]
            )
        )
        elements.append(table)
        doc.build(elements)
        return output_path
