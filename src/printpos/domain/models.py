from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional


class ProductCategory(str, Enum):
    PRINTING = "printing"
    BINDING = "binding"
    PHOTO = "photo"
    ADHESIVE = "adhesive"


class SupplyCategory(str, Enum):
    PAPER = "paper"
    SPIRAL = "spiral"
    COVER = "cover"
    INK = "ink"


class SupplyUnit(str, Enum):
    SHEET = "sheet"
    UNIT = "unit"
    GRAM = "gram"
    ML = "ml"


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"
    CARD = "card"


class ExpenseCategory(str, Enum):
    SUPPLIES = "supplies"
    SERVICES = "services"
    RENT = "rent"
    TAXES = "taxes"
    OTHER = "other"


class ReportPeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class AlertSeverity(str, Enum):
    LOW = "low"
    CRITICAL = "critical"


_DISPLAY_NAMES: dict[str, str] = {
    "printing": "Printing",
    "binding": "Binding",
    "photo": "Photographic",
    "adhesive": "Adhesive",
    "paper": "Paper",
    "spiral": "Spiral",
    "cover": "Cover",
    "ink": "Ink",
    "sheet": "Sheet",
    "unit": "Unit",
    "gram": "Gram",
    "ml": "ml",
    "cash": "Cash",
    "transfer": "Transfer",
    "card": "Card",
    "supplies": "Supplies",
    "services": "Services",
    "rent": "Rent",
    "taxes": "Taxes",
    "other": "Other",
    "day": "Daily",
    "week": "Weekly",
    "month": "Monthly",
    "low": "Low",
    "critical": "Critical",
}


def display_name(value: Enum | str) -> str:
    raw = value.value if isinstance(value, Enum) else str(value)
    if raw in _DISPLAY_NAMES:
        return _DISPLAY_NAMES[raw]
    return raw[:1].upper() + raw[1:].lower()


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category: ProductCategory
    price: float
    cost: float
    required_supplies: Mapping[str, float] = field(default_factory=dict)
    description: Optional[str] = None


@dataclass(frozen=True)
class Supply:
    id: str
    name: str
    category: SupplyCategory
    current_stock: float
    min_stock: float
    unit: SupplyUnit
    cost: float


@dataclass(frozen=True)
class SaleItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float
    unit_cost: float
    profit: float


@dataclass(frozen=True)
class Sale:
    id: str
    date: str
    items: tuple[SaleItem, ...]
    total: float
    profit: float
    payment_method: PaymentMethod


@dataclass(frozen=True)
class Expense:
    id: str
    date: str
    concept: str
    amount: float
    category: ExpenseCategory
    description: Optional[str] = None


@dataclass(frozen=True)
class CashRegister:
    id: str
    date: str
    opening_amount: float
    cash_sales: float
    total_expenses: float
    final_balance: float
    closed: bool


@dataclass(frozen=True)
class Settings:
    business_name: str = "Print & Co"
    currency: str = "$"
    tax_rate: float = 21
    low_stock_threshold: int = 10


@dataclass(frozen=True)
class AppState:
    products: tuple[Product, ...] = ()
    supplies: tuple[Supply, ...] = ()
    sales: tuple[Sale, ...] = ()
    expenses: tuple[Expense, ...] = ()
    cash_registers: tuple[CashRegister, ...] = ()
    settings: Settings = field(default_factory=Settings)

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def find_supply(self, supply_id: str) -> Optional[Supply]:
        return next((s for s in self.supplies if s.id == supply_id), None)


# Calculation results


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int
    subtotal: float
    profit: float


@dataclass(frozen=True)
class CartTotals:
    total: float
    total_profit: float
    item_count: int


@dataclass(frozen=True)
class StockCheck:
    can_process: bool
    missing_items: tuple[str, ...] = ()


@dataclass(frozen=True)
class StockAlert:
    supply_id: str
    supply_name: str
    current_stock: float
    min_stock: float
    severity: AlertSeverity


@dataclass(frozen=True)
class TopProduct:
    product_id: str
    product_name: str
    quantity: int
    revenue: float


@dataclass(frozen=True)
class SalesReport:
    period: ReportPeriod
    start_date: str
    end_date: str
    total_sales: float
    total_profit: float
    total_expenses: float
    net_profit: float
    sales_count: int
    average_ticket: float
    top_products: tuple[TopProduct, ...]


@dataclass(frozen=True)
class DailySummary:
    date: str
    total_sales: float
    total_profit: float
    total_expenses: float
    net_profit: float
    sales_count: int


@dataclass(frozen=True)
class DashboardStats:
    today_sales: float
    today_profit: float
    today_expenses: float
    month_sales: float
    month_profit: float
    low_stock_items: int


@dataclass(frozen=True)
class DaySummary:
    """Per-payment-method breakdown used when closing the register."""

    date: str
    total_sales: float
    cash_sales: float
    transfer_sales: float
    card_sales: float
    profit: float
    expenses: float
    net_profit: float
    sales_count: int
    cash_sales_count: int
    expenses_count: int

    @property
    def has_activity(self) -> bool:
        return self.sales_count > 0 or self.expenses_count > 0
