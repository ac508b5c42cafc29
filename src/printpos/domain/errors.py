from __future__ import annotations


class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class NotFoundError(AppError):
    pass


class InsufficientStockError(AppError):
    def __init__(self, message: str, missing_items: list[str] | None = None):
        super().__init__(message)
        self.missing_items = list(missing_items or [])


class RegisterClosedError(AppError):
    pass


class PersistenceError(AppError):
    pass


class ImportFormatError(AppError):
    pass
