from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from printpos.domain.calculations import apply_deductions, cart_line, cart_totals, check_stock, stock_deductions
from printpos.domain.cart import Cart
from printpos.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from printpos.domain.ids import new_id
from printpos.domain.models import AppState, CartLine, PaymentMethod, Sale, SaleItem, StockCheck
from printpos.repositories.state_store import StateStore
from printpos.repositories.unit_of_work import SnapshotUnitOfWork, UnitOfWork
from printpos.time_utils import format_date, format_datetime, in_range, local_now

log = logging.getLogger("printpos.sales")


class SalesService:
    def __init__(
        self,
        store: StateStore,
        uow_factory: Callable[[], UnitOfWork] | None = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.store = store
        self.uow_factory = uow_factory or (lambda: SnapshotUnitOfWork(store))
        self.clock = clock

    def build_cart(self, items: Iterable[tuple[str, int]]) -> Cart:
        """items: [(product_id, qty)]; repeated products accumulate on one line."""
        cart = Cart()
        for product_id, qty in items:
            product = self.store.state.find_product(product_id)
            if not product:
                raise NotFoundError(f"Product not found: {product_id}")
            cart = cart.add(product, int(qty))
        return cart

    def check_cart(self, cart: Cart) -> StockCheck:
        return check_stock(cart.lines, self.store.state.supplies)

    def record_sale(self, cart: Cart, payment_method: PaymentMethod | str = PaymentMethod.CASH) -> Sale:
        if cart.is_empty():
            raise ValidationError("Cart is empty.")
        for line in cart.lines:
            if int(line.quantity) <= 0:
                raise ValidationError("Qty must be >= 1.")
        try:
            method = PaymentMethod(payment_method)
        except ValueError as e:
            raise ValidationError(f"Unknown payment method: {payment_method}") from e

        sale_id = new_id("SALE")
        timestamp = format_datetime(self.clock())

        def transform(state: AppState) -> AppState:
            # Price, cost and recipe come from the snapshot being committed, not the cart.
            lines = [self._current_line(state, line) for line in cart.lines]
            check = check_stock(lines, state.supplies)
            if not check.can_process:
                raise InsufficientStockError("Not enough stock to process the sale.", list(check.missing_items))

            totals = cart_totals(lines)
            sale = Sale(
                id=sale_id,
                date=timestamp,
                items=tuple(
                    SaleItem(
                        product_id=line.product.id,
                        product_name=line.product.name,
                        quantity=line.quantity,
                        unit_price=line.product.price,
                        subtotal=line.subtotal,
                        unit_cost=line.product.cost,
                        profit=line.profit,
                    )
                    for line in lines
                ),
                total=totals.total,
                profit=totals.total_profit,
                payment_method=method,
            )
            return replace(
                state,
                sales=(sale,) + state.sales,
                supplies=apply_deductions(state.supplies, stock_deductions(lines)),
            )

        try:
            with self.uow_factory() as uow:
                uow.apply(transform)
        except InsufficientStockError as e:
            log.warning("sale_rejected reason=stock missing=%s", "; ".join(e.missing_items))
            raise

        sale = uow.state.sales[0]
        log.info(
            "sale_created sale_id=%s items=%s total=%.2f profit=%.2f method=%s",
            sale.id, len(sale.items), sale.total, sale.profit, sale.payment_method.value,
        )
        return sale

    @staticmethod
    def _current_line(state: AppState, line: CartLine) -> CartLine:
        product = state.find_product(line.product.id)
        if not product:
            raise NotFoundError(f"Product not found: {line.product.id}")
        return cart_line(product, int(line.quantity))

    def list_sales(self) -> list[Sale]:
        return list(self.store.state.sales)

    def list_sales_between(self, start: str, end: str) -> list[Sale]:
        return [s for s in self.store.state.sales if in_range(s.date, start, end)]

    def sales_for_date(self, day) -> list[Sale]:
        prefix = format_date(day)
        return [s for s in self.store.state.sales if s.date.startswith(prefix)]

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        return next((s for s in self.store.state.sales if s.id == sale_id), None)
