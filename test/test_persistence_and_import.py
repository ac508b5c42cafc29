import json
from dataclasses import replace
from pathlib import Path

import pytest

from conftest import FixedClock, make_store
from printpos.domain.catalog import initial_state
from printpos.domain.errors import ImportFormatError, NotFoundError
from printpos.domain.models import PaymentMethod
from printpos.repositories.codec import dumps_state, encode_state
from printpos.repositories.json_repo import JsonStateRepository
from printpos.services.backup_service import BackupService
from printpos.services.expense_service import ExpenseService
from printpos.services.sales_service import SalesService


def _busy_store(tmp_path: Path):
    store = make_store(tmp_path, state=initial_state())
    sales = SalesService(store, clock=FixedClock("2024-03-15T10:00:00"))
    sales.record_sale(sales.build_cart([("binding_14mm", 1), ("photo_115", 2)]), PaymentMethod.CARD)
    ExpenseService(store, clock=FixedClock("2024-03-15T12:00:00")).save_expense("Rent", 1000, "rent", "March")
    return store


def test_missing_or_empty_file_loads_seed(tmp_path: Path):
    repo = JsonStateRepository(tmp_path / "printshop_data.json")
    assert repo.load() == initial_state()

    repo.path.write_text("   ", encoding="utf-8")
    assert repo.load() == initial_state()


def test_malformed_file_loads_seed(tmp_path: Path):
    repo = JsonStateRepository(tmp_path / "printshop_data.json")
    repo.path.write_text("{not json", encoding="utf-8")
    assert repo.load() == initial_state()


def test_saved_document_uses_fixed_layout(tmp_path: Path):
    store = _busy_store(tmp_path)
    doc = json.loads(store.repo.path.read_text(encoding="utf-8"))

    assert list(doc) == ["products", "supplies", "sales", "expenses", "cashRegisters", "settings"]
    assert doc["settings"] == {"businessName": "Print & Co", "currency": "$", "taxRate": 21, "lowStockThreshold": 10}
    sale = doc["sales"][0]
    assert sale["paymentMethod"] == "card"
    assert sale["items"][0]["productId"] == "binding_14mm"
    assert doc["expenses"][0]["description"] == "March"
    assert not (tmp_path / "printshop_data.json.tmp").exists()


def test_non_array_field_and_bad_records_keep_fallback(tmp_path: Path):
    repo = JsonStateRepository(tmp_path / "printshop_data.json")
    seed = initial_state()
    doc = encode_state(seed)
    doc["supplies"] = {"oops": True}
    doc["sales"] = [{"id": "s1"}]
    doc["expenses"] = [{
        "id": "e1", "date": "2024-01-01T00:00:00", "concept": "Power", "amount": 10, "category": "services",
    }]
    doc["settings"] = {"currency": "EUR", "unknownKey": 1}
    repo.path.write_text(json.dumps(doc), encoding="utf-8")

    loaded = repo.load()

    assert loaded.supplies == seed.supplies
    assert loaded.sales == ()
    assert [e.concept for e in loaded.expenses] == ["Power"]
    assert loaded.settings == replace(seed.settings, currency="EUR")


def test_unknown_enum_value_rejects_field(tmp_path: Path):
    repo = JsonStateRepository(tmp_path / "printshop_data.json")
    doc = encode_state(initial_state())
    doc["products"][0]["category"] = "laminating"
    repo.path.write_text(json.dumps(doc), encoding="utf-8")

    assert repo.load().products == initial_state().products


def test_export_then_import_restores_same_state(tmp_path: Path):
    store = _busy_store(tmp_path / "a")
    exported = BackupService(store, tmp_path / "backups").export_data()

    other = make_store(tmp_path, state=initial_state())
    imported = BackupService(other, tmp_path / "backups").import_data(exported)

    assert imported == store.state
    assert other.state == store.state
    assert other.repo.load() == store.state


def test_import_rejects_invalid_json_and_keeps_state(tmp_path: Path):
    store = _busy_store(tmp_path)
    before = store.state
    backup = BackupService(store, tmp_path / "backups")

    with pytest.raises(ImportFormatError, match="Invalid data format"):
        backup.import_data("this is not json")
    with pytest.raises(ImportFormatError, match="Could not read"):
        backup.import_from_file(tmp_path / "nope.json")

    assert store.state is before


def test_partial_import_keeps_current_fields(tmp_path: Path):
    store = _busy_store(tmp_path)
    before = store.state

    imported = BackupService(store, tmp_path / "backups").import_data(
        json.dumps({"expenses": [], "settings": {"businessName": "Copy Corner"}})
    )

    assert imported.expenses == ()
    assert imported.sales == before.sales
    assert imported.products == before.products
    assert imported.settings.business_name == "Copy Corner"
    assert imported.settings.currency == "$"


def test_backups_retention_and_restore(tmp_path: Path):
    store = _busy_store(tmp_path)
    backup = BackupService(store, tmp_path / "backups", max_backups=3)
    snapshot = store.state

    paths = [backup.create_backup() for _ in range(5)]
    kept = backup.list_backups()
    assert len(kept) == 3
    assert kept == sorted(paths)[-3:]

    backup.reset_data()
    assert store.state == initial_state()
    assert not store.repo.path.exists()

    restored = backup.restore_latest_backup()
    assert restored == kept[-1]
    assert store.state == snapshot


def test_restore_without_backups(tmp_path: Path):
    backup = BackupService(make_store(tmp_path), tmp_path / "backups")
    with pytest.raises(NotFoundError):
        backup.restore_latest_backup()


def test_export_to_file_is_pretty_printed(tmp_path: Path):
    store = _busy_store(tmp_path)
    target = BackupService(store, tmp_path / "backups").export_to_file(tmp_path / "out" / "export.json")

    text = target.read_text(encoding="utf-8")
    assert text == dumps_state(store.state, pretty=True)
    assert "\n  " in text


def test_state_file_with_invalid_utf8_loads_seed(tmp_path: Path):
    repo = JsonStateRepository(tmp_path / "printshop_data.json")
    repo.path.write_bytes(b'{"products": "\xff\xfe"}')

    assert repo.load() == initial_state()
    assert make_store(tmp_path).state == initial_state()


def test_wrongly_typed_flags_and_settings_keep_fallback(tmp_path: Path):
    repo = JsonStateRepository(tmp_path / "printshop_data.json")
    doc = encode_state(initial_state())
    doc["cashRegisters"] = [{
        "id": "CASH_2024-03-15", "date": "2024-03-15", "openingAmount": 1000, "cashSales": 500,
        "totalExpenses": 200, "finalBalance": 1300, "closed": "false",
    }]
    doc["settings"] = {"taxRate": "abc", "currency": 5, "businessName": "Copy Corner", "lowStockThreshold": 3}
    repo.path.write_text(json.dumps(doc), encoding="utf-8")

    loaded = repo.load()

    assert loaded.cash_registers == ()
    assert loaded.settings == replace(initial_state().settings, business_name="Copy Corner", low_stock_threshold=3)
