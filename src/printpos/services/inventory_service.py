from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Mapping, Optional

from printpos.domain.calculations import stock_alerts
from printpos.domain.errors import NotFoundError, ValidationError
from printpos.domain.ids import new_id
from printpos.domain.models import AppState, Product, ProductCategory, StockAlert, Supply
from printpos.repositories.state_store import StateStore
from printpos.repositories.unit_of_work import SnapshotUnitOfWork, UnitOfWork

log = logging.getLogger("printpos.stock")


class InventoryService:
    def __init__(self, store: StateStore, uow_factory: Callable[[], UnitOfWork] | None = None):
        self.store = store
        self.uow_factory = uow_factory or (lambda: SnapshotUnitOfWork(store))

    # -------- supplies --------

    def list_supplies(self) -> list[Supply]:
        return list(self.store.state.supplies)

    def get_supply(self, supply_id: str) -> Supply:
        s = self.store.state.find_supply(supply_id)
        if not s:
            raise NotFoundError(f"Supply not found: {supply_id}")
        return s

    def stock_alerts(self) -> list[StockAlert]:
        return stock_alerts(self.store.state.supplies)

    def top_alerts(self, limit: int = 5) -> list[StockAlert]:
        return self.stock_alerts()[:limit]

    def set_stock(self, supply_id: str, new_stock: float) -> Supply:
        if new_stock is None or new_stock < 0:
            raise ValidationError("Stock must be >= 0.")
        before = self.get_supply(supply_id)
        updated = self._write_stock(supply_id, lambda s: new_stock)
        log.info("stock_set supply=%s from=%s to=%s", supply_id, before.current_stock, updated.current_stock)
        return updated

    def adjust_stock(self, supply_id: str, delta: float) -> Supply:
        before = self.get_supply(supply_id)
        updated = self._write_stock(supply_id, lambda s: max(0, s.current_stock + delta))
        log.info("stock_adjusted supply=%s delta=%s from=%s to=%s", supply_id, delta, before.current_stock, updated.current_stock)
        return updated

    def _write_stock(self, supply_id: str, compute: Callable[[Supply], float]) -> Supply:
        def transform(state: AppState) -> AppState:
            if not state.find_supply(supply_id):
                raise NotFoundError(f"Supply not found: {supply_id}")
            return replace(state, supplies=tuple(
                replace(s, current_stock=compute(s)) if s.id == supply_id else s
                for s in state.supplies
            ))

        with self.uow_factory() as uow:
            uow.apply(transform)
        return uow.state.find_supply(supply_id)

    # -------- products --------

    def list_products(self) -> list[Product]:
        return list(self.store.state.products)

    def get_product(self, product_id: str) -> Product:
        p = self.store.state.find_product(product_id)
        if not p:
            raise NotFoundError(f"Product not found: {product_id}")
        return p

    def search_products(self, term: str = "", category: ProductCategory | str | None = None) -> list[Product]:
        needle = (term or "").strip().lower()
        out = []
        for p in self.store.state.products:
            if category not in (None, "", "all") and p.category != ProductCategory(category):
                continue
            if needle and needle not in p.name.lower() and needle not in (p.description or "").lower():
                continue
            out.append(p)
        return out

    def add_product(
        self,
        name: str,
        category: ProductCategory | str,
        price: float,
        cost: float,
        required_supplies: Mapping[str, float],
        description: Optional[str] = None,
    ) -> Product:
        name = (name or "").strip()
        self._validate_pricing(name, price, cost)
        try:
            category = ProductCategory(category)
        except ValueError as e:
            raise ValidationError(f"Unknown product category: {category}") from e

        recipe = {sid: qty for sid, qty in (required_supplies or {}).items() if qty > 0}
        if not recipe:
            raise ValidationError("Select at least one required supply.")
        unknown = [sid for sid in recipe if not self.store.state.find_supply(sid)]
        if unknown:
            raise NotFoundError(f"Supply not found: {', '.join(unknown)}")

        product = Product(
            id=new_id("custom"),
            name=name,
            category=category,
            price=float(price),
            cost=float(cost),
            required_supplies=recipe,
            description=(description or "").strip() or None,
        )
        with self.uow_factory() as uow:
            uow.apply(lambda state: replace(state, products=state.products + (product,)))
        log.info("product_created product_id=%s price=%.2f cost=%.2f", product.id, product.price, product.cost)
        return product

    def update_product(
        self,
        product_id: str,
        name: str,
        price: float,
        cost: float,
        description: Optional[str] = None,
    ) -> Product:
        name = (name or "").strip()
        self._validate_pricing(name, price, cost)
        current = self.get_product(product_id)
        updated = replace(
            current,
            name=name,
            price=float(price),
            cost=float(cost),
            description=(description or "").strip() or None,
        )
        with self.uow_factory() as uow:
            uow.apply(lambda state: replace(state, products=tuple(
                updated if p.id == product_id else p for p in state.products
            )))
        return updated

    def delete_product(self, product_id: str) -> None:
        self.get_product(product_id)
        with self.uow_factory() as uow:
            uow.apply(lambda state: replace(state, products=tuple(
                p for p in state.products if p.id != product_id
            )))
        log.info("product_deleted product_id=%s", product_id)

    @staticmethod
    def _validate_pricing(name: str, price: float, cost: float) -> None:
        if not name:
            raise ValidationError("Name is required.")
        if price is None or price <= 0:
            raise ValidationError("Price must be > 0.")
        if cost is None or cost < 0:
            raise ValidationError("Cost must be >= 0.")
        if cost > 0 and cost >= price:
            raise ValidationError("Cost must be lower than the sale price.")
