from pathlib import Path

from openpyxl import load_workbook

from conftest import FixedClock, make_store
from printpos.domain.catalog import initial_state
from printpos.domain.models import PaymentMethod
from printpos.services.expense_service import ExpenseService
from printpos.services.inventory_service import InventoryService
from printpos.services.reporting_service import ReportingService
from printpos.services.sales_service import SalesService


def _store_with_march_activity(tmp_path: Path):
    store = make_store(tmp_path, state=initial_state())
    sales = SalesService(store, clock=FixedClock("2024-03-11T09:00:00", "2024-03-15T10:00:00", "2024-04-01T08:00:00"))
    sales.record_sale(sales.build_cart([("photo_115", 2)]), PaymentMethod.CASH)
    sales.record_sale(sales.build_cart([("binding_20mm", 1), ("print_a4_bond80_single_bw", 10)]), PaymentMethod.CARD)
    sales.record_sale(sales.build_cart([("photo_230", 1)]))
    ExpenseService(store, clock=FixedClock("2024-03-12T12:00:00")).save_expense("Power", 300, "services", "Bill")
    return store


def test_export_writes_all_sheets_for_the_window(tmp_path: Path):
    store = _store_with_march_activity(tmp_path)
    out = tmp_path / "report.xlsx"

    report = ReportingService(store).export_sales_report_excel(str(out), "week", "2024-03-15")

    assert (report.start_date, report.end_date) == ("2024-03-11", "2024-03-17")
    assert report.sales_count == 2
    assert report.total_sales == 900 + 750 + 800

    wb = load_workbook(out)
    assert wb.sheetnames == ["Summary", "Sales Detail", "Expenses", "Top Products"]

    summary = wb["Summary"]
    assert summary["A1"].value == "Print & Co - Weekly report"
    assert summary["B3"].value == "2024-03-11  ->  2024-03-17"
    assert summary["B5"].value == 2
    assert summary["B6"].value == 2450
    assert summary["B8"].value == 300

    detail = wb["Sales Detail"]
    rows = list(detail.iter_rows(min_row=2, values_only=True))
    assert len(rows) == 3
    assert {r[3] for r in rows} == {"photo_115", "binding_20mm", "print_a4_bond80_single_bw"}
    assert "SalesDetail" in detail.tables

    expenses = wb["Expenses"]
    assert expenses["B3"].value == 300
    assert [c.value for c in expenses[6]] == [
        store.state.expenses[0].id, "2024-03-12T12:00:00", "Power", "Services", "Bill", 300,
    ]

    top = wb["Top Products"]
    assert top["B2"].value == "photo_115"
    assert top["E2"].value == 900
    assert top.max_row == 4


def test_export_empty_period_has_headers_only(tmp_path: Path):
    store = make_store(tmp_path, state=initial_state())
    out = tmp_path / "empty.xlsx"

    report = ReportingService(store).export_sales_report_excel(str(out), "day", "2024-01-01")

    assert report.sales_count == 0
    wb = load_workbook(out)
    assert wb["Sales Detail"].max_row == 1
    assert len(wb["Sales Detail"].tables) == 0
    assert wb["Summary"]["B10"].value == 0


def test_reporting_service_queries(tmp_path: Path):
    store = _store_with_march_activity(tmp_path)
    reporting = ReportingService(store)

    month = reporting.sales_report("month", "2024-03-31")
    assert month.sales_count == 2
    assert month.total_expenses == 300
    assert month.net_profit == month.total_profit - 300

    day = reporting.daily_summary("2024-04-01")
    assert (day.total_sales, day.sales_count) == (850, 1)

    InventoryService(store).set_stock("spiral_9mm", 1)
    stats = reporting.dashboard_stats("2024-04-01")
    assert stats.today_sales == 850
    assert stats.month_sales == 850
    assert stats.low_stock_items == 1
