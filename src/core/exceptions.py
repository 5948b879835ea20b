"""
Domain exceptions for the ledger.

Every error carries enough context (item name, quantities involved) for the
caller to render a user-facing message. None of them are retried.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class ItemNotUnderContractError(ValidationError):
    """A fulfilled item is not part of the supplier's contract."""

    def __init__(self, supplier_id: str, item_name: str):
        super().__init__(
            field="items",
            message=f"Item '{item_name}' is not under contract for supplier {supplier_id}",
            value=item_name,
        )
        self.details.update({"supplier_id": supplier_id, "item_name": item_name})


# Stock Exceptions
class StockError(LedgerError):
    """Base exception for lot and stock rule violations."""

    pass


class OverAllocationError(StockError):
    """Sum of lot quantities would exceed the delivery quantity."""

    def __init__(
        self,
        delivery_id: int,
        item_name: str | None,
        allocated: float,
        requested: float,
        delivered: float,
    ):
        super().__init__(
            f"Lots for '{item_name}' would total {allocated + requested:.3f}, "
            f"above the delivered quantity {delivered:.3f}",
            code="OVER_ALLOCATION",
            details={
                "delivery_id": delivery_id,
                "item_name": item_name,
                "allocated": allocated,
                "requested": requested,
                "delivered": delivered,
            },
        )


class ContractBalanceExceededError(StockError):
    """Lot would push an item's received total above what was contracted."""

    def __init__(self, item_name: str, requested: float, remaining: float, unit: str):
        super().__init__(
            f"Lot of {requested:.3f} {unit} of '{item_name}' exceeds the contract balance "
            f"still to receive ({remaining:.3f} {unit})",
            code="CONTRACT_BALANCE_EXCEEDED",
            details={
                "item_name": item_name,
                "requested": requested,
                "remaining": remaining,
                "unit": unit,
            },
        )


class InsufficientStockError(StockError):
    """Withdrawal exceeds the lot's remaining quantity."""

    def __init__(self, barcode: str, item_name: str, requested: float, available: float):
        super().__init__(
            f"Cannot withdraw {requested:.3f} of '{item_name}' from lot {barcode}: "
            f"only {available:.3f} remaining",
            code="INSUFFICIENT_STOCK",
            details={
                "barcode": barcode,
                "item_name": item_name,
                "requested": requested,
                "available": available,
            },
        )


class DuplicateBarcodeError(StockError):
    """Another lot already uses this barcode."""

    def __init__(self, barcode: str, existing_lot_id: int):
        super().__init__(
            f"Barcode already registered: {barcode}",
            code="DUPLICATE_BARCODE",
            details={"barcode": barcode, "existing_lot_id": existing_lot_id},
        )


# Lookup Exceptions
class NotFoundError(LedgerError):
    """Unknown barcode, item or supplier reference."""

    def __init__(self, entity: str, key: Any):
        super().__init__(
            f"{entity.capitalize()} not found: {key}",
            code=f"{entity.upper()}_NOT_FOUND",
            details={"entity": entity, "key": key},
        )


class SupplierNotFoundError(NotFoundError):
    def __init__(self, supplier_id: str):
        super().__init__("supplier", supplier_id)


class DeliveryNotFoundError(NotFoundError):
    def __init__(self, delivery_id: int):
        super().__init__("delivery", delivery_id)


class LotNotFoundError(NotFoundError):
    def __init__(self, barcode: str):
        super().__init__("lot", barcode)


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
