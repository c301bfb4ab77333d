from __future__ import annotations

import pandas as pd
import pytest

from brickbook.reports.base import ReportContext
from brickbook.reports.report_factory import EXTENSIONS, ReportFactory
from brickbook.reports.statements import (
    LOAD_COLUMNS,
    WORKER_COLUMNS,
    brick_load_statement,
    brick_load_summary,
    brick_loads_table,
    worker_statement,
    workers_summary,
)
from brickbook.io.excel_exporter import ExcelExporter
from brickbook.db.models import WorkType
from brickbook.services.rates import WorkEntry


@pytest.fixture
def load_with_logs(loads):
    load = loads.create_load("Kothapalli", "9876543210", "5000", "500", "2024-01-01")
    loads.add_payment(load.id, "1000", "2024-01-02")
    loads.add_brick_log(load.id, "2000", "500", "2024-01-03")
    return loads.get_load(load.id), loads.list_logs(load.id)


@pytest.mark.parametrize("report_type", ["html", "pdf", "excel"])
def test_reports_generation(tmp_path, report_type):
    df = pd.DataFrame([{"a": 1, "b": None}, {"a": 2, "b": 3.5}])
    out = tmp_path / f"r{EXTENSIONS[report_type]}"
    ctx = ReportContext(title="T", filters={"x": "y"}, summary={"Due": "1,500.00"})
    assert ReportFactory().generate(report_type, df, out, ctx) == out
    assert out.exists() and out.stat().st_size > 0


def test_html_report_content(tmp_path):
    df = pd.DataFrame([{"Name": "<Ramu>", "Balance": None}])
    out = ReportFactory().generate("html", df, tmp_path / "r.html", ReportContext(title="Workers", summary={"Total": "5"}))
    html = out.read_text(encoding="utf-8")
    assert "<h1>Workers</h1>" in html
    assert "&lt;Ramu&gt;" in html
    assert "nan" not in html
    assert "<td>Total</td>" in html


def test_brick_load_statement_running_due(load_with_logs):
    load, logs = load_with_logs
    df = brick_load_statement(load, logs)
    assert list(df.columns) == LOAD_COLUMNS
    assert list(df["Date"]) == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert list(df["Entry"]) == ["brick", "payment", "brick"]
    assert list(df["Due"]) == [2500, 1500, 2500]
    assert df["Bricks"].iloc[0] == 5000
    assert df["Due"].iloc[-1] == load.due


def test_brick_load_summary(load_with_logs):
    load, _ = load_with_logs
    summary = brick_load_summary(load)
    assert summary["Total bricks"] == "7,000"
    assert summary["Total amount"] == "3,500.00"
    assert summary["Due"] == "2,500.00"


def test_worker_statement_running_balance(workers):
    w = workers.create_worker("Ramu", "1")
    entry = WorkEntry(WorkType.BRICK_CARRY)
    entry.set_brick_count(1000)
    workers.add_work_record(w.id, entry, "2024-03-01")
    workers.add_usage(w.id, "100", "2024-03-02")
    df = worker_statement(workers.worker_ledger(w.id))
    assert list(df.columns) == WORKER_COLUMNS
    assert list(df["Entry"]) == ["brickCarry", "usage"]
    assert list(df["Balance"]) == [220, 120]


def test_listing_tables(workers, loads):
    workers.create_worker("Ramu", "1", initial_debt="300")
    loads.create_load("Kothapalli", "2", "1000", "500", "2024-01-01", amount_paid="100")
    people = workers_summary(workers.list_workers_with_balances())
    assert people.loc[0, "Name"] == "Ramu" and people.loc[0, "Balance"] == 0
    table = brick_loads_table(loads.list_loads())
    assert table.loc[0, "Bricks"] == 1000
    assert table.loc[0, "Due"] == 400


def test_excel_export(tmp_path, store, workers):
    workers.create_worker("Ramu", "1")
    out = ExcelExporter(store).export_file(tmp_path / "dump.xlsx")
    assert out.exists() and out.stat().st_size > 0
