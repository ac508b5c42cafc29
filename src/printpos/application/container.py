from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from printpos.config import AppPaths, get_app_paths
from printpos.repositories.json_repo import JsonStateRepository
from printpos.repositories.state_store import StateStore
from printpos.services.backup_service import BackupService
from printpos.services.cash_register_service import CashRegisterService
from printpos.services.expense_service import ExpenseService
from printpos.services.inventory_service import InventoryService
from printpos.services.reporting_service import ReportingService
from printpos.services.sales_service import SalesService
from printpos.services.settings_service import SettingsService


@dataclass(frozen=True)
class AppContainer:
    paths: AppPaths
    store: StateStore
    inventory: InventoryService
    sales: SalesService
    expenses: ExpenseService
    registers: CashRegisterService
    reporting: ReportingService
    settings: SettingsService
    backup: BackupService


def build_container(base_dir: Path | str | None = None) -> AppContainer:
    paths = get_app_paths(base_dir=base_dir)
    store = StateStore(JsonStateRepository(paths.state_file))

    return AppContainer(
        paths=paths,
        store=store,
        inventory=InventoryService(store),
        sales=SalesService(store),
        expenses=ExpenseService(store),
        registers=CashRegisterService(store),
        reporting=ReportingService(store),
        settings=SettingsService(store),
        backup=BackupService(store, paths.backups_dir),
    )
