from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from brickbook.db.gateway import RecordStore
from brickbook.db.mapping import TABLES

logger = logging.getLogger(__name__)


class ExcelExporter:
    """Export every record table to an Excel workbook with separate sheets."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def export_file(self, path: str | Path) -> Path:
        path = Path(path)
        with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
            for model, spec in TABLES.items():
                rows = [
                    {"id": record.id, **spec.to_row(record), "created_at": record.created_at}
                    for record in self.store.list(model)
                ]
                df = pd.DataFrame(rows)
                df.to_excel(writer, index=False, sheet_name=spec.name)
        logger.info("Exported all tables to %s", path)
        return path
