"""Conversion between the in-memory snapshot and the persisted JSON document.

The document layout is fixed:

    {"products": [...], "supplies": [...], "sales": [...], "expenses": [...],
     "cashRegisters": [...], "settings": {...}}

Decoding never fails on bad content. Each list field must be a JSON array whose
records all decode; otherwise the fallback snapshot's value for that field is
kept. Settings are merged key by key over the fallback settings; a value of the wrong
type keeps the fallback value.
"""
from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from printpos.domain.errors import ImportFormatError
from printpos.domain.models import (
    AppState,
    CashRegister,
    Expense,
    ExpenseCategory,
    PaymentMethod,
    Product,
    ProductCategory,
    Sale,
    SaleItem,
    Settings,
    Supply,
    SupplyCategory,
    SupplyUnit,
)

log = logging.getLogger(__name__)

_SETTINGS_KEYS = {
    "businessName": "business_name",
    "currency": "currency",
    "taxRate": "tax_rate",
    "lowStockThreshold": "low_stock_threshold",
}
_TEXT_SETTINGS = {"business_name", "currency"}


# -------- encode --------

def _optional(doc: dict, key: str, value: Optional[str]) -> dict:
    if value is not None:
        doc[key] = value
    return doc


def encode_product(p: Product) -> dict:
    doc = {
        "id": p.id,
        "name": p.name,
        "category": p.category.value,
        "price": p.price,
        "cost": p.cost,
        "requiredSupplies": dict(p.required_supplies),
    }
    return _optional(doc, "description", p.description)


def encode_supply(s: Supply) -> dict:
    return {
        "id": s.id,
        "name": s.name,
        "category": s.category.value,
        "currentStock": s.current_stock,
        "minStock": s.min_stock,
        "unit": s.unit.value,
        "cost": s.cost,
    }


def encode_sale(s: Sale) -> dict:
    return {
        "id": s.id,
        "date": s.date,
        "items": [
            {
                "productId": it.product_id,
                "productName": it.product_name,
                "quantity": it.quantity,
                "unitPrice": it.unit_price,
                "subtotal": it.subtotal,
                "unitCost": it.unit_cost,
                "profit": it.profit,
            }
            for it in s.items
        ],
        "total": s.total,
        "profit": s.profit,
        "paymentMethod": s.payment_method.value,
    }


def encode_expense(e: Expense) -> dict:
    doc = {
        "id": e.id,
        "date": e.date,
        "concept": e.concept,
        "amount": e.amount,
        "category": e.category.value,
    }
    return _optional(doc, "description", e.description)


def encode_cash_register(c: CashRegister) -> dict:
    return {
        "id": c.id,
        "date": c.date,
        "openingAmount": c.opening_amount,
        "cashSales": c.cash_sales,
        "totalExpenses": c.total_expenses,
        "finalBalance": c.final_balance,
        "closed": c.closed,
    }


def encode_settings(s: Settings) -> dict:
    return {doc_key: getattr(s, attr) for doc_key, attr in _SETTINGS_KEYS.items()}


def encode_state(state: AppState) -> dict:
    return {
        "products": [encode_product(p) for p in state.products],
        "supplies": [encode_supply(s) for s in state.supplies],
        "sales": [encode_sale(s) for s in state.sales],
        "expenses": [encode_expense(e) for e in state.expenses],
        "cashRegisters": [encode_cash_register(c) for c in state.cash_registers],
        "settings": encode_settings(state.settings),
    }


def dumps_state(state: AppState, pretty: bool = False) -> str:
    return json.dumps(encode_state(state), ensure_ascii=False, indent=2 if pretty else None)


# -------- decode --------

def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a number, got {value!r}")
    return value


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Expected a string, got {value!r}")
    return value


def _flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Expected a boolean, got {value!r}")
    return value


def _opt_text(doc: dict, key: str) -> Optional[str]:
    value = doc.get(key)
    return None if value is None else _text(value)


def decode_product(doc: dict) -> Product:
    recipe = doc.get("requiredSupplies") or {}
    if not isinstance(recipe, dict):
        raise ValueError("requiredSupplies must be an object")
    return Product(
        id=_text(doc["id"]),
        name=_text(doc["name"]),
        category=ProductCategory(doc["category"]),
        price=_number(doc["price"]),
        cost=_number(doc["cost"]),
        required_supplies={_text(k): _number(v) for k, v in recipe.items()},
        description=_opt_text(doc, "description"),
    )


def decode_supply(doc: dict) -> Supply:
    return Supply(
        id=_text(doc["id"]),
        name=_text(doc["name"]),
        category=SupplyCategory(doc["category"]),
        current_stock=_number(doc["currentStock"]),
        min_stock=_number(doc["minStock"]),
        unit=SupplyUnit(doc["unit"]),
        cost=_number(doc["cost"]),
    )


def decode_sale(doc: dict) -> Sale:
    items = doc["items"]
    if not isinstance(items, list):
        raise ValueError("items must be an array")
    return Sale(
        id=_text(doc["id"]),
        date=_text(doc["date"]),
        items=tuple(
            SaleItem(
                product_id=_text(it["productId"]),
                product_name=_text(it["productName"]),
                quantity=_number(it["quantity"]),
                unit_price=_number(it["unitPrice"]),
                subtotal=_number(it["subtotal"]),
                unit_cost=_number(it["unitCost"]),
                profit=_number(it["profit"]),
            )
            for it in items
        ),
        total=_number(doc["total"]),
        profit=_number(doc["profit"]),
        payment_method=PaymentMethod(doc["paymentMethod"]),
    )


def decode_expense(doc: dict) -> Expense:
    return Expense(
        id=_text(doc["id"]),
        date=_text(doc["date"]),
        concept=_text(doc["concept"]),
        amount=_number(doc["amount"]),
        category=ExpenseCategory(doc["category"]),
        description=_opt_text(doc, "description"),
    )


def decode_cash_register(doc: dict) -> CashRegister:
    return CashRegister(
        id=_text(doc["id"]),
        date=_text(doc["date"]),
        opening_amount=_number(doc["openingAmount"]),
        cash_sales=_number(doc["cashSales"]),
        total_expenses=_number(doc["totalExpenses"]),
        final_balance=_number(doc["finalBalance"]),
        closed=_flag(doc["closed"]),
    )


def merge_settings(base: Settings, doc: Any) -> Settings:
    if not isinstance(doc, dict):
        return base
    changes = {}
    for doc_key, attr in _SETTINGS_KEYS.items():
        if doc_key not in doc or doc[doc_key] is None:
            continue
        check = _text if attr in _TEXT_SETTINGS else _number
        try:
            changes[attr] = check(doc[doc_key])
        except ValueError as e:
            log.warning("settings_value_invalid key=%s error=%s kept_fallback=1", doc_key, e)
    ignored = set(doc) - set(_SETTINGS_KEYS)
    if ignored:
        log.info("settings_keys_ignored keys=%s", sorted(ignored))
    return replace(base, **changes)


def _decode_list(doc: dict, key: str, decoder: Callable[[dict], Any], fallback: tuple) -> tuple:
    raw = doc.get(key)
    if raw is None:
        return fallback
    if not isinstance(raw, list):
        log.warning("state_field_not_array field=%s kept_fallback=1", key)
        return fallback
    try:
        return tuple(decoder(item) for item in raw)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        log.warning("state_field_invalid field=%s error=%s kept_fallback=1", key, e)
        return fallback


def decode_state(doc: Any, fallback: AppState) -> AppState:
    if not isinstance(doc, dict):
        log.warning("state_document_not_object type=%s", type(doc).__name__)
        return fallback
    return AppState(
        products=_decode_list(doc, "products", decode_product, fallback.products),
        supplies=_decode_list(doc, "supplies", decode_supply, fallback.supplies),
        sales=_decode_list(doc, "sales", decode_sale, fallback.sales),
        expenses=_decode_list(doc, "expenses", decode_expense, fallback.expenses),
        cash_registers=_decode_list(doc, "cashRegisters", decode_cash_register, fallback.cash_registers),
        settings=merge_settings(fallback.settings, doc.get("settings")),
    )


def loads_state(text: str, fallback: AppState) -> AppState:
    try:
        doc = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ImportFormatError(f"Invalid data format: {e}") from e
    return decode_state(doc, fallback)
