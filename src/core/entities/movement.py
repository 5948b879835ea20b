"""Warehouse movement ledger entities."""

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MovementType(str, Enum):
    """Types of warehouse movements."""

    ENTRY = "entry"
    EXIT = "exit"


class WarehouseMovement(BaseModel):
    """
    Immutable ledger entry recording a stock entry or exit against a lot.

    Lot, delivery and supplier are referenced by value so the entry stays
    readable after an administrative delete removes its source.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    movement_type: MovementType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    movement_date: date = Field(default_factory=date.today)
    lot_id: int
    lot_code: str
    barcode: str
    item_name: str
    supplier_id: str
    supplier_name: str
    delivery_id: int
    inbound_invoice: str | None = None  # entries
    outbound_reference: str | None = None  # exits: invoice or requisition
    quantity: float = 0.0
    expiration_date: date | None = None
