from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping, Sequence

from printpos.domain.models import (
    AlertSeverity,
    AppState,
    CartLine,
    CartTotals,
    DailySummary,
    DashboardStats,
    Expense,
    Product,
    ReportPeriod,
    Sale,
    SalesReport,
    StockAlert,
    StockCheck,
    Supply,
    TopProduct,
)
from printpos.time_utils import DateLike, format_date, in_range, period_range

DELETED_PRODUCT_NAME = "Deleted product"
TOP_PRODUCTS_LIMIT = 5
CRITICAL_RATIO = 0.5


# -------- cart --------

def cart_line(product: Product, quantity: int) -> CartLine:
    return CartLine(
        product=product,
        quantity=quantity,
        subtotal=product.price * quantity,
        profit=(product.price - product.cost) * quantity,
    )


def cart_totals(lines: Iterable[CartLine]) -> CartTotals:
    lines = list(lines)
    return CartTotals(
        total=sum(line.subtotal for line in lines),
        total_profit=sum(line.profit for line in lines),
        item_count=sum(line.quantity for line in lines),
    )


def profit_margin(price: float, cost: float) -> float:
    if price == 0:
        return 0.0
    return (price - cost) / price * 100


# -------- stock --------

def supply_requirements(lines: Iterable[CartLine]) -> dict[str, float]:
    """Total quantity of each supply consumed by the cart, keyed in first-seen order.

    Both the sufficiency check and the deduction are derived from this map.
    """
    required: dict[str, float] = {}
    for line in lines:
        for supply_id, per_unit in line.product.required_supplies.items():
            required[supply_id] = required.get(supply_id, 0) + per_unit * line.quantity
    return required


def check_stock(lines: Iterable[CartLine], supplies: Sequence[Supply]) -> StockCheck:
    by_id = {s.id: s for s in supplies}
    missing: list[str] = []
    for supply_id, required in supply_requirements(lines).items():
        supply = by_id.get(supply_id)
        if supply is None:
            missing.append(f"Supply not found: {supply_id}")
            continue
        if supply.current_stock < required:
            missing.append(
                f"Insufficient stock: {supply.name} (required: {_qty(required)}, available: {_qty(supply.current_stock)})"
            )
    return StockCheck(can_process=not missing, missing_items=tuple(missing))


def stock_deductions(lines: Iterable[CartLine]) -> dict[str, float]:
    return supply_requirements(lines)


def apply_deductions(supplies: Iterable[Supply], deductions: Mapping[str, float]) -> tuple[Supply, ...]:
    out = []
    for s in supplies:
        if s.id in deductions:
            s = replace(s, current_stock=max(0, s.current_stock - deductions[s.id]))
        out.append(s)
    return tuple(out)


def stock_status(current: float, minimum: float) -> str:
    if current <= minimum * CRITICAL_RATIO:
        return AlertSeverity.CRITICAL.value
    if current <= minimum:
        return AlertSeverity.LOW.value
    return "ok"


def stock_alerts(supplies: Iterable[Supply]) -> list[StockAlert]:
    alerts = [
        StockAlert(
            supply_id=s.id,
            supply_name=s.name,
            current_stock=s.current_stock,
            min_stock=s.min_stock,
            severity=AlertSeverity(stock_status(s.current_stock, s.min_stock)),
        )
        for s in supplies
        if s.current_stock <= s.min_stock
    ]
    # Critical first, then lowest stock; sort is stable for ties.
    alerts.sort(key=lambda a: (a.severity is not AlertSeverity.CRITICAL, a.current_stock))
    return alerts


# -------- reporting --------

def sales_in_range(sales: Iterable[Sale], start: str, end: str) -> list[Sale]:
    return [s for s in sales if in_range(s.date, start, end)]


def expenses_in_range(expenses: Iterable[Expense], start: str, end: str) -> list[Expense]:
    return [e for e in expenses if in_range(e.date, start, end)]


def top_products(sales: Iterable[Sale], products: Sequence[Product], limit: int = TOP_PRODUCTS_LIMIT) -> list[TopProduct]:
    totals: dict[str, list] = {}
    for sale in sales:
        for item in sale.items:
            acc = totals.setdefault(item.product_id, [0, 0.0])
            acc[0] += item.quantity
            acc[1] += item.subtotal

    names = {p.id: p.name for p in products}
    ranked = [
        TopProduct(
            product_id=pid,
            product_name=names.get(pid, DELETED_PRODUCT_NAME),
            quantity=qty,
            revenue=revenue,
        )
        for pid, (qty, revenue) in totals.items()
    ]
    ranked.sort(key=lambda t: t.revenue, reverse=True)
    return ranked[:limit]


def sales_report(
    period: ReportPeriod | str,
    anchor: DateLike,
    sales: Iterable[Sale],
    expenses: Iterable[Expense],
    products: Sequence[Product],
) -> SalesReport:
    period = ReportPeriod(period)
    start, end = period_range(period, anchor)

    period_sales = sales_in_range(sales, start, end)
    period_expenses = expenses_in_range(expenses, start, end)

    total_sales = sum(s.total for s in period_sales)
    total_profit = sum(s.profit for s in period_sales)
    total_expenses = sum(e.amount for e in period_expenses)
    count = len(period_sales)

    return SalesReport(
        period=period,
        start_date=start,
        end_date=end,
        total_sales=total_sales,
        total_profit=total_profit,
        total_expenses=total_expenses,
        net_profit=total_profit - total_expenses,
        sales_count=count,
        average_ticket=total_sales / count if count else 0,
        top_products=tuple(top_products(period_sales, products)),
    )


def daily_summary(day: DateLike, sales: Iterable[Sale], expenses: Iterable[Expense]) -> DailySummary:
    day = format_date(day)
    day_sales = [s for s in sales if s.date.startswith(day)]
    day_expenses = [e for e in expenses if e.date.startswith(day)]

    total_profit = sum(s.profit for s in day_sales)
    total_expenses = sum(e.amount for e in day_expenses)
    return DailySummary(
        date=day,
        total_sales=sum(s.total for s in day_sales),
        total_profit=total_profit,
        total_expenses=total_expenses,
        net_profit=total_profit - total_expenses,
        sales_count=len(day_sales),
    )


def dashboard_stats(state: AppState, today: DateLike) -> DashboardStats:
    day = format_date(today)
    month = day[:7]

    today_sales = [s for s in state.sales if s.date.startswith(day)]
    month_sales = [s for s in state.sales if s.date.startswith(month)]

    return DashboardStats(
        today_sales=sum(s.total for s in today_sales),
        today_profit=sum(s.profit for s in today_sales),
        today_expenses=sum(e.amount for e in state.expenses if e.date.startswith(day)),
        month_sales=sum(s.total for s in month_sales),
        month_profit=sum(s.profit for s in month_sales),
        low_stock_items=len(stock_alerts(state.supplies)),
    )


def cash_register_balance(opening: float, cash_sales: float, expenses: float) -> float:
    return opening + cash_sales - expenses


def _qty(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"
