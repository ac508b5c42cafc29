from pathlib import Path

import pytest

from conftest import FixedClock, make_store
from printpos.domain.cart import Cart
from printpos.domain.catalog import initial_state
from printpos.domain.errors import InsufficientStockError, NotFoundError, PersistenceError, ValidationError
from printpos.domain.models import PaymentMethod
from printpos.services.inventory_service import InventoryService
from printpos.services.sales_service import SalesService


def _setup(tmp_path: Path):
    store = make_store(tmp_path, state=initial_state())
    sales = SalesService(store, clock=FixedClock("2024-03-15T10:30:00"))
    return store, sales


def test_record_sale_prepends_sale_and_deducts_supplies_in_one_write(tmp_path: Path):
    store, sales = _setup(tmp_path)
    cart = sales.build_cart([("binding_9mm", 2), ("print_a4_bond80_single_color", 3)])

    sale = sales.record_sale(cart, PaymentMethod.TRANSFER)

    assert sale.date == "2024-03-15T10:30:00"
    assert sale.total == 2 * 450 + 3 * 150
    assert sale.profit == 2 * (450 - 115) + 3 * (150 - 45)
    assert sale.payment_method is PaymentMethod.TRANSFER
    assert store.state.sales[0] == sale

    state = store.state
    assert state.find_supply("spiral_9mm").current_stock == 98
    assert state.find_supply("cover_clear").current_stock == 196
    assert state.find_supply("paper_bond_80_a4").current_stock == 497

    reloaded = store.repo.load()
    assert reloaded.sales[0] == sale
    assert reloaded.find_supply("cover_clear").current_stock == 196


def test_newest_sale_is_first(tmp_path: Path):
    store = make_store(tmp_path, state=initial_state())
    sales = SalesService(store, clock=FixedClock("2024-03-15T10:00:00", "2024-03-15T11:00:00"))

    first = sales.record_sale(sales.build_cart([("photo_115", 1)]))
    second = sales.record_sale(sales.build_cart([("photo_190", 1)]))

    assert [s.id for s in store.state.sales] == [second.id, first.id]


def test_sale_items_keep_price_at_sale_time(tmp_path: Path):
    store, sales = _setup(tmp_path)
    inventory = InventoryService(store)

    sale = sales.record_sale(sales.build_cart([("photo_115", 2)]))
    inventory.update_product("photo_115", "Photo Print 115gsm", price=600, cost=150)

    item = store.state.sales[0].items[0]
    assert sale.items[0] == item
    assert (item.unit_price, item.unit_cost, item.subtotal, item.profit) == (450, 145, 900, 610)


def test_sale_uses_current_catalog_price_not_stale_cart(tmp_path: Path):
    store, sales = _setup(tmp_path)
    cart = sales.build_cart([("photo_115", 1)])
    InventoryService(store).update_product("photo_115", "Photo Print 115gsm", price=500, cost=150)

    sale = sales.record_sale(cart)
    assert sale.total == 500
    assert sale.profit == 350


def test_insufficient_stock_rejects_sale_and_leaves_state_untouched(tmp_path: Path):
    store, sales = _setup(tmp_path)
    before = store.state

    cart = sales.build_cart([("binding_50mm", 15), ("binding_50mm", 6)])
    assert not sales.check_cart(cart).can_process

    with pytest.raises(InsufficientStockError) as exc:
        sales.record_sale(cart)

    assert exc.value.missing_items == ["Insufficient stock: Spiral 50mm (required: 21, available: 20)"]
    assert store.state is before
    assert not (tmp_path / "printshop_data.json").exists()


def test_stock_is_revalidated_against_committed_snapshot(tmp_path: Path):
    store, sales = _setup(tmp_path)
    cart = sales.build_cart([("adhesive_print_a3", 10)])
    assert sales.check_cart(cart).can_process

    InventoryService(store).set_stock("adhesive_a3", 4)

    with pytest.raises(InsufficientStockError):
        sales.record_sale(cart)
    assert store.state.sales == ()
    assert store.state.find_supply("adhesive_a3").current_stock == 4


def test_record_sale_validation(tmp_path: Path):
    store, sales = _setup(tmp_path)

    with pytest.raises(ValidationError, match="Cart is empty"):
        sales.record_sale(Cart())

    with pytest.raises(ValidationError, match="Unknown payment method"):
        sales.record_sale(sales.build_cart([("photo_115", 1)]), "cheque")

    with pytest.raises(NotFoundError):
        sales.build_cart([("no_such_product", 1)])


def test_sale_for_product_removed_after_cart_was_built(tmp_path: Path):
    store, sales = _setup(tmp_path)
    cart = sales.build_cart([("photo_230", 1)])
    InventoryService(store).delete_product("photo_230")

    with pytest.raises(NotFoundError):
        sales.record_sale(cart)
    assert store.state.sales == ()


class FailingRepo:
    def __init__(self, inner):
        self.inner = inner
        self.path = inner.path

    def load(self):
        return self.inner.load()

    def save(self, state):
        raise PersistenceError("disk full")

    def clear(self):
        self.inner.clear()


def test_failed_write_keeps_previous_snapshot(tmp_path: Path):
    store, _ = _setup(tmp_path)
    store.repo = FailingRepo(store.repo)
    sales = SalesService(store)
    before = store.state

    with pytest.raises(PersistenceError):
        sales.record_sale(sales.build_cart([("photo_115", 1)]))

    assert store.state is before
    assert store.state.find_supply("paper_photo_115").current_stock == 100


def test_sales_queries_by_date(tmp_path: Path):
    store = make_store(tmp_path, state=initial_state())
    sales = SalesService(store, clock=FixedClock("2024-03-14T18:00:00", "2024-03-15T09:00:00"))
    sales.record_sale(sales.build_cart([("photo_115", 1)]))
    latest = sales.record_sale(sales.build_cart([("photo_115", 1)]))

    assert [s.id for s in sales.sales_for_date("2024-03-15")] == [latest.id]
    assert len(sales.list_sales_between("2024-03-14", "2024-03-15")) == 2
    assert sales.get_sale(latest.id) == latest
    assert sales.get_sale("missing") is None
