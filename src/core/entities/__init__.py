"""Core domain entities."""

from src.core.entities.delivery import Delivery, Lot
from src.core.entities.ledger import (
    ContractQuota,
    FifoAdvisory,
    ItemBalance,
    LedgerSnapshot,
    LotReference,
    PeriodQuota,
)
from src.core.entities.movement import MovementType, WarehouseMovement
from src.core.entities.supplier import ContractItem, Supplier, UnitDescriptor

__all__ = [
    # Contract entities
    "Supplier",
    "ContractItem",
    "UnitDescriptor",
    # Delivery entities
    "Delivery",
    "Lot",
    # Ledger entities
    "MovementType",
    "WarehouseMovement",
    # Read-side values
    "LedgerSnapshot",
    "LotReference",
    "FifoAdvisory",
    "PeriodQuota",
    "ContractQuota",
    "ItemBalance",
]
