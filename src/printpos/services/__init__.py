from .sales_service import SalesService
from .inventory_service import InventoryService
from .expense_service import ExpenseService
from .cash_register_service import CashRegisterService
from .reporting_service import ReportingService
from .settings_service import SettingsService
from .backup_service import BackupService

__all__ = [
    "SalesService",
    "InventoryService",
    "ExpenseService",
    "CashRegisterService",
    "ReportingService",
    "SettingsService",
    "BackupService",
]
