from __future__ import annotations

from pathlib import Path

import pandas as pd

from brickbook.reports.base import ReportContext, ReportStrategy


class ExcelReportStrategy(ReportStrategy):
    def generate(self, df: pd.DataFrame, output_path: Path, context: ReportContext) -> Path:
        with pd.ExcelWriter(output_path, engine="xlsxwriter") as writer:
            df.to_excel(writer, index=False, sheet_name="Statement", startrow=len(context.summary) + 1)
            sheet = writer.sheets["Statement"]
            sheet.write(0, 0, context.title)
            for row, (label, value) in enumerate(context.summary.items(), start=1):
                sheet.write(row, 0, label)
                sheet.write(row, 1, value)
        return output_path
