from __future__ import annotations

from dataclasses import fields, replace
from typing import Callable

from printpos.domain.errors import ValidationError
from printpos.domain.models import Settings
from printpos.repositories.state_store import StateStore
from printpos.repositories.unit_of_work import SnapshotUnitOfWork, UnitOfWork


class SettingsService:
    def __init__(self, store: StateStore, uow_factory: Callable[[], UnitOfWork] | None = None):
        self.store = store
        self.uow_factory = uow_factory or (lambda: SnapshotUnitOfWork(store))

    def get_settings(self) -> Settings:
        return self.store.state.settings

    def update_settings(self, **changes) -> Settings:
        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(unknown)}")
        if "business_name" in changes and not str(changes["business_name"]).strip():
            raise ValidationError("Business name is required.")
        if changes.get("tax_rate", 0) < 0:
            raise ValidationError("Tax rate must be >= 0.")
        if changes.get("low_stock_threshold", 0) < 0:
            raise ValidationError("Low stock threshold must be >= 0.")

        with self.uow_factory() as uow:
            uow.apply(lambda state: replace(state, settings=replace(state.settings, **changes)))
        return uow.state.settings
