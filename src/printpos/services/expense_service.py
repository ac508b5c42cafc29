from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from printpos.domain.errors import NotFoundError, ValidationError
from printpos.domain.ids import new_id
from printpos.domain.models import AppState, Expense, ExpenseCategory
from printpos.repositories.state_store import StateStore
from printpos.repositories.unit_of_work import SnapshotUnitOfWork, UnitOfWork
from printpos.time_utils import format_date, format_datetime, in_range, local_now

log = logging.getLogger(__name__)


class ExpenseService:
    def __init__(
        self,
        store: StateStore,
        uow_factory: Callable[[], UnitOfWork] | None = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.store = store
        self.uow_factory = uow_factory or (lambda: SnapshotUnitOfWork(store))
        self.clock = clock

    def save_expense(
        self,
        concept: str,
        amount: float,
        category: ExpenseCategory | str = ExpenseCategory.OTHER,
        description: Optional[str] = None,
        expense_id: Optional[str] = None,
    ) -> Expense:
        """Create an expense, or edit the one with `expense_id` in place keeping its date."""
        concept = (concept or "").strip()
        if not concept:
            raise ValidationError("Concept is required.")
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be > 0.")
        try:
            category = ExpenseCategory(category)
        except ValueError as e:
            raise ValidationError(f"Unknown expense category: {category}") from e

        existing = self.get_expense(expense_id) if expense_id else None
        if expense_id and not existing:
            raise NotFoundError(f"Expense not found: {expense_id}")

        expense = Expense(
            id=existing.id if existing else new_id("EXP"),
            date=existing.date if existing else format_datetime(self.clock()),
            concept=concept,
            amount=float(amount),
            category=category,
            description=(description or "").strip() or None,
        )

        def transform(state: AppState) -> AppState:
            if existing:
                return replace(state, expenses=tuple(expense if e.id == expense.id else e for e in state.expenses))
            return replace(state, expenses=(expense,) + state.expenses)

        with self.uow_factory() as uow:
            uow.apply(transform)
        log.info("expense_saved expense_id=%s amount=%.2f edited=%s", expense.id, expense.amount, int(bool(existing)))
        return expense

    def delete_expense(self, expense_id: str) -> None:
        if not self.get_expense(expense_id):
            raise NotFoundError(f"Expense not found: {expense_id}")
        with self.uow_factory() as uow:
            uow.apply(lambda state: replace(state, expenses=tuple(e for e in state.expenses if e.id != expense_id)))
        log.info("expense_deleted expense_id=%s", expense_id)

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.store.state.expenses if e.id == expense_id), None)

    def list_expenses(self) -> list[Expense]:
        return list(self.store.state.expenses)

    def list_expenses_between(self, start: str, end: str) -> list[Expense]:
        return [e for e in self.store.state.expenses if in_range(e.date, start, end)]

    def expenses_for_date(self, day) -> list[Expense]:
        prefix = format_date(day)
        return [e for e in self.store.state.expenses if e.date.startswith(prefix)]
