from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from typing import Optional, Sequence

from printpos import __version__
from printpos.application.container import AppContainer, build_container
from printpos.config import get_app_paths
from printpos.domain.errors import AppError, InsufficientStockError
from printpos.domain.models import ExpenseCategory, PaymentMethod, ReportPeriod, display_name
from printpos.logging_config import setup_logging

log = logging.getLogger(__name__)


def _money(amount: float, currency: str) -> str:
    return f"{currency} {amount:,.0f}"


def _parse_item(raw: str) -> tuple[str, int]:
    product_id, _, qty = raw.partition(":")
    try:
        return product_id, int(qty or 1)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid item '{raw}', expected PRODUCT_ID[:QTY]")


def _cmd_alerts(app: AppContainer, args) -> None:
    alerts = app.inventory.top_alerts(args.limit) if args.limit else app.inventory.stock_alerts()
    if not alerts:
        print("No stock alerts.")
        return
    for a in alerts:
        print(f"[{display_name(a.severity).upper():8}] {a.supply_name}: {a.current_stock:g} (min {a.min_stock:g})")


def _cmd_sell(app: AppContainer, args) -> None:
    cart = app.sales.build_cart(args.items)
    sale = app.sales.record_sale(cart, args.payment)
    currency = app.settings.get_settings().currency
    print(f"Sale {sale.id} recorded: total {_money(sale.total, currency)} | profit {_money(sale.profit, currency)}")


def _cmd_expense(app: AppContainer, args) -> None:
    e = app.expenses.save_expense(args.concept, args.amount, args.category, args.description, expense_id=args.id)
    print(f"Expense {e.id} saved: {e.concept} {_money(e.amount, app.settings.get_settings().currency)}")


def _cmd_stock(app: AppContainer, args) -> None:
    if args.set is not None:
        s = app.inventory.set_stock(args.supply_id, args.set)
    else:
        s = app.inventory.adjust_stock(args.supply_id, args.adjust)
    print(f"{s.name}: {s.current_stock:g} {display_name(s.unit).lower()}")


def _cmd_report(app: AppContainer, args) -> None:
    r = app.reporting.sales_report(args.period, args.date)
    currency = app.settings.get_settings().currency
    print(f"{display_name(r.period)} report {r.start_date} -> {r.end_date}")
    print(f"  Sales:          {_money(r.total_sales, currency)} ({r.sales_count})")
    print(f"  Profit:         {_money(r.total_profit, currency)}")
    print(f"  Expenses:       {_money(r.total_expenses, currency)}")
    print(f"  Net profit:     {_money(r.net_profit, currency)}")
    print(f"  Average ticket: {_money(r.average_ticket, currency)}")
    for i, t in enumerate(r.top_products, start=1):
        print(f"  {i}. {t.product_name} x{t.quantity} {_money(t.revenue, currency)}")


def _cmd_export_excel(app: AppContainer, args) -> None:
    app.reporting.export_sales_report_excel(args.path, args.period, args.date)
    print(f"Report written to {args.path}")


def _cmd_close_register(app: AppContainer, args) -> None:
    opening = args.opening
    if opening is None:
        opening = app.registers.suggested_opening(args.date)
        if opening is None:
            raise AppError("Opening amount is required (no closed register for the previous day).")
    reg = app.registers.close_register(args.date, opening)
    print(f"Register {reg.date} closed: final balance {_money(reg.final_balance, app.settings.get_settings().currency)}")


def _cmd_export(app: AppContainer, args) -> None:
    if args.path == "-":
        print(app.backup.export_data())
    else:
        print(f"Data exported to {app.backup.export_to_file(args.path)}")


def _cmd_import(app: AppContainer, args) -> None:
    app.backup.create_backup()
    app.backup.import_from_file(args.path)
    print(f"Data imported from {args.path}")


def _cmd_backup(app: AppContainer, args) -> None:
    print(f"Backup written to {app.backup.create_backup()}")


def _cmd_reset(app: AppContainer, args) -> None:
    if not args.yes:
        raise AppError("Refusing to reset without --yes.")
    app.backup.create_backup()
    app.backup.reset_data()
    print("Data reset to the initial catalog.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="printpos", description="Print shop sales, stock and expenses.")
    parser.add_argument("--home", help="Data directory (defaults to the per-user application directory).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    today = date.today().isoformat()
    periods = [p.value for p in ReportPeriod]

    p = sub.add_parser("alerts", help="List supplies at or below their minimum stock.")
    p.add_argument("--limit", type=int, default=0)
    p.set_defaults(func=_cmd_alerts)

    p = sub.add_parser("sell", help="Record a sale.")
    p.add_argument("items", nargs="+", type=_parse_item, metavar="PRODUCT_ID[:QTY]")
    p.add_argument("--payment", choices=[m.value for m in PaymentMethod], default=PaymentMethod.CASH.value)
    p.set_defaults(func=_cmd_sell)

    p = sub.add_parser("expense", help="Record or edit an expense.")
    p.add_argument("concept")
    p.add_argument("amount", type=float)
    p.add_argument("--category", choices=[c.value for c in ExpenseCategory], default=ExpenseCategory.OTHER.value)
    p.add_argument("--description")
    p.add_argument("--id", help="Edit the expense with this id instead of creating one.")
    p.set_defaults(func=_cmd_expense)

    p = sub.add_parser("stock", help="Set or adjust a supply's stock.")
    p.add_argument("supply_id")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--set", type=float)
    group.add_argument("--adjust", type=float)
    p.set_defaults(func=_cmd_stock)

    for name, func, help_text in (
        ("report", _cmd_report, "Show a sales report."),
        ("export-excel", _cmd_export_excel, "Write a sales report workbook."),
    ):
        p = sub.add_parser(name, help=help_text)
        if name == "export-excel":
            p.add_argument("path")
        p.add_argument("--period", choices=periods, default=ReportPeriod.DAY.value)
        p.add_argument("--date", default=today)
        p.set_defaults(func=func)

    p = sub.add_parser("close-register", help="Close the cash register for a day.")
    p.add_argument("--date", default=today)
    p.add_argument("--opening", type=float)
    p.set_defaults(func=_cmd_close_register)

    p = sub.add_parser("export", help="Export all data as JSON ('-' for stdout).")
    p.add_argument("path")
    p.set_defaults(func=_cmd_export)

    p = sub.add_parser("import", help="Import data from a JSON export.")
    p.add_argument("path")
    p.set_defaults(func=_cmd_import)

    p = sub.add_parser("backup", help="Write a timestamped backup.")
    p.set_defaults(func=_cmd_backup)

    p = sub.add_parser("reset", help="Discard all data and restore the initial catalog.")
    p.add_argument("--yes", action="store_true")
    p.set_defaults(func=_cmd_reset)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(get_app_paths(base_dir=args.home).logs_dir, level=logging.INFO)
    app = build_container(args.home)

    try:
        args.func(app, args)
    except InsufficientStockError as e:
        print(f"Error: {e}", file=sys.stderr)
        for item in e.missing_items:
            print(f"  - {item}", file=sys.stderr)
        return 1
    except AppError as e:
        log.warning("command_failed command=%s error=%s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
