from pathlib import Path

import pytest

from conftest import FixedClock, make_store
from printpos.domain.catalog import initial_state
from printpos.domain.errors import RegisterClosedError, ValidationError
from printpos.domain.models import PaymentMethod
from printpos.services.cash_register_service import CashRegisterService
from printpos.services.expense_service import ExpenseService
from printpos.services.sales_service import SalesService


def _day_with_activity(tmp_path: Path):
    store = make_store(tmp_path, state=initial_state())
    sales = SalesService(store, clock=FixedClock("2024-03-15T10:00:00", "2024-03-15T11:00:00", "2024-03-15T12:00:00"))
    # 2 x 250 = 500 cash, plus card and transfer sales that never reach the drawer.
    sales.record_sale(sales.build_cart([("print_a4_bond80_double_color", 2)]), PaymentMethod.CASH)
    sales.record_sale(sales.build_cart([("photo_115", 1)]), PaymentMethod.CARD)
    sales.record_sale(sales.build_cart([("photo_190", 1)]), PaymentMethod.TRANSFER)
    ExpenseService(store, clock=FixedClock("2024-03-15T18:00:00")).save_expense("Toner", 200, "supplies")
    return store


def test_close_register_computes_final_balance_from_cash_only(tmp_path: Path):
    store = _day_with_activity(tmp_path)
    registers = CashRegisterService(store)

    summary = registers.day_summary("2024-03-15")
    assert (summary.cash_sales, summary.card_sales, summary.transfer_sales) == (500, 450, 650)
    assert summary.sales_count == 3
    assert summary.cash_sales_count == 1

    reg = registers.close_register("2024-03-15", 1000)

    assert reg.id == "CASH_2024-03-15"
    assert reg.closed is True
    assert (reg.opening_amount, reg.cash_sales, reg.total_expenses) == (1000, 500, 200)
    assert reg.final_balance == 1300
    assert store.repo.load().cash_registers == (reg,)


def test_closed_register_cannot_be_closed_again(tmp_path: Path):
    store = _day_with_activity(tmp_path)
    registers = CashRegisterService(store)
    registers.close_register("2024-03-15", 1000)
    before = store.state

    with pytest.raises(RegisterClosedError, match="already closed"):
        registers.close_register("2024-03-15", 5000)

    assert store.state is before
    assert registers.get_register("2024-03-15").final_balance == 1300


def test_close_register_requires_activity_and_valid_opening(tmp_path: Path):
    store = _day_with_activity(tmp_path)
    registers = CashRegisterService(store)

    with pytest.raises(ValidationError, match="No sales or expenses"):
        registers.close_register("2024-03-16", 100)
    with pytest.raises(ValidationError, match="Opening amount"):
        registers.close_register("2024-03-15", -1)

    assert store.state.cash_registers == ()


def test_suggested_opening_and_recent_closures(tmp_path: Path):
    store = _day_with_activity(tmp_path)
    registers = CashRegisterService(store)
    assert registers.suggested_opening("2024-03-16") is None

    registers.close_register("2024-03-15", 1000)
    assert registers.suggested_opening("2024-03-16") == 1300
    assert registers.suggested_opening("2024-03-17") is None

    ExpenseService(store, clock=FixedClock("2024-03-16T09:00:00")).save_expense("Coffee", 50)
    registers.close_register("2024-03-16", registers.suggested_opening("2024-03-16"))

    assert [r.date for r in registers.recent_closures()] == ["2024-03-16", "2024-03-15"]
    assert registers.get_register("2024-03-16").final_balance == 1250
    assert [r.date for r in registers.recent_closures(limit=1)] == ["2024-03-16"]


def test_new_closures_are_stored_newest_first(tmp_path: Path):
    store = _day_with_activity(tmp_path)
    registers = CashRegisterService(store)
    registers.close_register("2024-03-15", 1000)

    ExpenseService(store, clock=FixedClock("2024-03-16T09:00:00")).save_expense("Coffee", 50)
    registers.close_register("2024-03-16", 1300)

    assert [r.date for r in store.repo.load().cash_registers] == ["2024-03-16", "2024-03-15"]
