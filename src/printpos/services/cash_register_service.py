from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from printpos.domain.calculations import cash_register_balance
from printpos.domain.errors import RegisterClosedError, ValidationError
from printpos.domain.ids import cash_register_id
from printpos.domain.models import AppState, CashRegister, DaySummary, PaymentMethod
from printpos.repositories.state_store import StateStore
from printpos.repositories.unit_of_work import SnapshotUnitOfWork, UnitOfWork
from printpos.time_utils import DateLike, format_date, previous_day

log = logging.getLogger("printpos.sales")


def _day_summary(state: AppState, day: str) -> DaySummary:
    sales = [s for s in state.sales if s.date.startswith(day)]
    expenses = [e for e in state.expenses if e.date.startswith(day)]

    def total_for(method: PaymentMethod) -> float:
        return sum(s.total for s in sales if s.payment_method is method)

    profit = sum(s.profit for s in sales)
    total_expenses = sum(e.amount for e in expenses)
    return DaySummary(
        date=day,
        total_sales=sum(s.total for s in sales),
        cash_sales=total_for(PaymentMethod.CASH),
        transfer_sales=total_for(PaymentMethod.TRANSFER),
        card_sales=total_for(PaymentMethod.CARD),
        profit=profit,
        expenses=total_expenses,
        net_profit=profit - total_expenses,
        sales_count=len(sales),
        cash_sales_count=sum(1 for s in sales if s.payment_method is PaymentMethod.CASH),
        expenses_count=len(expenses),
    )


class CashRegisterService:
    def __init__(self, store: StateStore, uow_factory: Callable[[], UnitOfWork] | None = None):
        self.store = store
        self.uow_factory = uow_factory or (lambda: SnapshotUnitOfWork(store))

    def day_summary(self, day: DateLike) -> DaySummary:
        return _day_summary(self.store.state, format_date(day))

    def get_register(self, day: DateLike) -> Optional[CashRegister]:
        key = format_date(day)
        return next((c for c in self.store.state.cash_registers if c.date == key), None)

    def suggested_opening(self, day: DateLike) -> Optional[float]:
        """Final balance of the previous day's closed register, if there is one."""
        prev = self.get_register(previous_day(day))
        if prev and prev.closed:
            return prev.final_balance
        return None

    def recent_closures(self, limit: int = 5) -> list[CashRegister]:
        closed = [c for c in self.store.state.cash_registers if c.closed]
        closed.sort(key=lambda c: c.date, reverse=True)
        return closed[:limit]

    def close_register(self, day: DateLike, opening_amount: float) -> CashRegister:
        key = format_date(day)
        if opening_amount is None or opening_amount < 0:
            raise ValidationError("Opening amount must be >= 0.")

        def transform(state: AppState) -> AppState:
            existing = next((c for c in state.cash_registers if c.date == key), None)
            if existing and existing.closed:
                raise RegisterClosedError(f"Cash register for {key} is already closed.")

            summary = _day_summary(state, key)
            if not summary.has_activity:
                raise ValidationError(f"No sales or expenses recorded for {key}.")

            register = CashRegister(
                id=existing.id if existing else cash_register_id(key),
                date=key,
                opening_amount=float(opening_amount),
                cash_sales=summary.cash_sales,
                total_expenses=summary.expenses,
                final_balance=cash_register_balance(float(opening_amount), summary.cash_sales, summary.expenses),
                closed=True,
            )
            if existing:
                registers = tuple(register if c.date == key else c for c in state.cash_registers)
            else:
                registers = (register,) + state.cash_registers
            return replace(state, cash_registers=registers)

        with self.uow_factory() as uow:
            uow.apply(transform)

        register = next(c for c in uow.state.cash_registers if c.date == key)
        log.info(
            "register_closed date=%s opening=%.2f cash_sales=%.2f expenses=%.2f final=%.2f",
            key, register.opening_amount, register.cash_sales, register.total_expenses, register.final_balance,
        )
        return register
