from __future__ import annotations

from pathlib import Path

import pandas as pd
from jinja2 import Environment, FileSystemLoader, select_autoescape

from brickbook.reports.base import ReportContext, ReportStrategy

TEMPLATES_DIR = Path(__file__).with_name("templates")


class HtmlReportStrategy(ReportStrategy):
    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or TEMPLATES_DIR

    def generate(self, df: pd.DataFrame, output_path: Path, context: ReportContext) -> Path:
        env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            enable_async=False,
        )
        template = env.get_template("base.html")
        html = template.render(
            title=context.title,
            filters=context.filters,
            summary=context.summary,
            columns=list(df.columns),
            rows=[["" if pd.isna(v) else v for v in row] for row in df.values.tolist()],
        )
        output_path.write_text(html, encoding="utf-8")
        return output_path
