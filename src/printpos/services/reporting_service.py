from __future__ import annotations

import logging

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from printpos.domain.calculations import (
    daily_summary,
    dashboard_stats,
    expenses_in_range,
    profit_margin,
    sales_in_range,
    sales_report,
)
from printpos.domain.models import DailySummary, DashboardStats, ReportPeriod, SalesReport, display_name
from printpos.repositories.state_store import StateStore
from printpos.time_utils import DateLike

log = logging.getLogger(__name__)


class ReportingService:
    def __init__(self, store: StateStore):
        self.store = store

    def sales_report(self, period: ReportPeriod | str, anchor: DateLike) -> SalesReport:
        state = self.store.state
        return sales_report(period, anchor, state.sales, state.expenses, state.products)

    def daily_summary(self, day: DateLike) -> DailySummary:
        state = self.store.state
        return daily_summary(day, state.sales, state.expenses)

    def dashboard_stats(self, today: DateLike) -> DashboardStats:
        return dashboard_stats(self.store.state, today)

    def export_sales_report_excel(self, path: str, period: ReportPeriod | str, anchor: DateLike) -> SalesReport:
        state = self.store.state
        report = sales_report(period, anchor, state.sales, state.expenses, state.products)
        currency = state.settings.currency
        wb = Workbook()

        def money(cell):
            cell.number_format = f'"{currency}" #,##0.00'

        def pct(cell):
            cell.number_format = "0.00%"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, start_row: int, start_col: int, end_row: int, end_col: int):
            ref = f"{get_column_letter(start_col)}{start_row}:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        sales_rows = sales_in_range(state.sales, report.start_date, report.end_date)
        expense_rows = expenses_in_range(state.expenses, report.start_date, report.end_date)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = f"{state.settings.business_name} - {display_name(report.period)} report"
        ws["A1"].font = Font(bold=True, size=14)

        ws["A3"] = "Window"
        ws["B3"] = f"{report.start_date}  ->  {report.end_date}"

        rows = [
            ("Sales count", int(report.sales_count), "int"),
            ("Total sales", float(report.total_sales), "money"),
            ("Gross profit", float(report.total_profit), "money"),
            ("Expenses", float(report.total_expenses), "money"),
            ("Net profit (profit - expenses)", float(report.net_profit), "money"),
            ("Average ticket", float(report.average_ticket), "money"),
        ]

        start_row = 5
        for i, (label, val, kind) in enumerate(rows):
            r = start_row + i
            ws[f"A{r}"] = label
            ws[f"B{r}"] = val
            if kind == "money":
                money(ws[f"B{r}"])

        set_widths(ws, {"A": 32, "B": 34})

        # -------- 2) Sales Detail --------
        ws2 = wb.create_sheet("Sales Detail")
        ws2.append([
            "Sale ID", "Datetime", "Payment",
            "Product ID", "Product Name",
            "Qty", "Unit Price", "Unit Cost",
            "Line Revenue", "Line Profit", "Margin %"
        ])
        bold_row(ws2, 1)

        out_row = 2
        for s in sales_rows:
            for it in s.items:
                ws2.append([
                    s.id, s.date, display_name(s.payment_method),
                    it.product_id, it.product_name,
                    it.quantity, float(it.unit_price), float(it.unit_cost),
                    float(it.subtotal), float(it.profit),
                    profit_margin(it.unit_price, it.unit_cost) / 100,
                ])
                for col in "GHIJ":
                    money(ws2[f"{col}{out_row}"])
                pct(ws2[f"K{out_row}"])
                out_row += 1

        ws2.freeze_panes = "A2"
        set_widths(ws2, {
            "A": 28, "B": 22, "C": 12,
            "D": 30, "E": 42,
            "F": 6, "G": 14, "H": 14,
            "I": 16, "J": 16, "K": 10
        })
        if ws2.max_row >= 2:
            add_table(ws2, "SalesDetail", 1, 1, ws2.max_row, 11)

        # -------- 3) Expenses --------
        ws3 = wb.create_sheet("Expenses")
        ws3["A1"] = "Expenses"
        ws3["A1"].font = Font(bold=True, size=14)

        ws3["A3"] = "Total expenses"
        ws3["B3"] = float(report.total_expenses)
        money(ws3["B3"])

        ws3.append([])
        ws3.append(["Expense ID", "Datetime", "Concept", "Category", "Description", "Amount"])
        bold_row(ws3, 5)

        out_row = 6
        for e in expense_rows:
            ws3.append([e.id, e.date, e.concept, display_name(e.category), e.description or "", float(e.amount)])
            money(ws3[f"F{out_row}"])
            out_row += 1

        ws3.freeze_panes = "A6"
        set_widths(ws3, {"A": 28, "B": 22, "C": 28, "D": 14, "E": 34, "F": 14})
        if ws3.max_row >= 6:
            add_table(ws3, "ExpensesDetail", 5, 1, ws3.max_row, 6)

        # -------- 4) Top Products --------
        ws4 = wb.create_sheet("Top Products")
        ws4.append(["Rank", "Product ID", "Product Name", "Qty", "Revenue"])
        bold_row(ws4, 1)
        for rank, top in enumerate(report.top_products, start=1):
            ws4.append([rank, top.product_id, top.product_name, top.quantity, float(top.revenue)])
            money(ws4[f"E{rank + 1}"])
        set_widths(ws4, {"A": 6, "B": 30, "C": 42, "D": 8, "E": 16})

        wb.save(path)
        log.info("report_exported path=%s period=%s start=%s end=%s", path, report.period.value, report.start_date, report.end_date)
        return report
