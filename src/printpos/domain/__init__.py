from .models import (
    AppState,
    CashRegister,
    Expense,
    ExpenseCategory,
    PaymentMethod,
    Product,
    ProductCategory,
    ReportPeriod,
    Sale,
    SaleItem,
    Settings,
    Supply,
    SupplyCategory,
    SupplyUnit,
    display_name,
)
from .errors import (
    AppError,
    ImportFormatError,
    InsufficientStockError,
    NotFoundError,
    PersistenceError,
    RegisterClosedError,
    ValidationError,
)

__all__ = [
    "AppState",
    "CashRegister",
    "Expense",
    "ExpenseCategory",
    "PaymentMethod",
    "Product",
    "ProductCategory",
    "ReportPeriod",
    "Sale",
    "SaleItem",
    "Settings",
    "Supply",
    "SupplyCategory",
    "SupplyUnit",
    "display_name",
    "AppError",
    "ImportFormatError",
    "InsufficientStockError",
    "NotFoundError",
    "PersistenceError",
    "RegisterClosedError",
    "ValidationError",
]
