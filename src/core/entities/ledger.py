"""
Read-side ledger values.

Snapshots, lot references, advisories, quotas and balances. None of these
are persisted: they are recomputed from suppliers and the movement ledger.
"""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field

from src.core.entities.movement import WarehouseMovement
from src.core.entities.supplier import Supplier


class LedgerSnapshot(BaseModel):
    """Committed state as of the moment it was read."""

    suppliers: list[Supplier] = Field(default_factory=list)
    movements: list[WarehouseMovement] = Field(default_factory=list)
    taken_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class LotReference(BaseModel):
    """A lot located in the ledger, with the context needed to find it physically."""

    lot_id: int
    lot_code: str
    barcode: str
    delivery_id: int
    delivery_date: date
    supplier_id: str
    supplier_name: str
    item_name: str
    remaining_quantity: float
    expiration_date: date | None = None


class FifoAdvisory(BaseModel):
    """
    Warning raised when a withdrawal skips the oldest lot of an item.

    Not a failure: the caller must confirm an override to proceed.
    """

    item_name: str
    requested: LotReference
    oldest: LotReference

    @property
    def message(self) -> str:
        return (
            f"Lot {self.requested.barcode} is not the oldest stock of '{self.item_name}': "
            f"lot {self.oldest.barcode} from {self.oldest.supplier_name} "
            f"({self.oldest.delivery_date.isoformat()}) should leave first"
        )


class PeriodQuota(BaseModel):
    """Delivery obligation for one allocation period."""

    index: int
    label: str  # "YYYY-MM"
    start: date
    end: date  # exclusive
    base_target: float
    carried_deficit: float  # shortfall folded in from the previous period
    adjusted_target: float  # may be negative
    delivered: float
    remaining: float  # clamped at 0 for display
    target_value: float = 0.0
    delivered_value: float = 0.0


class ContractQuota(BaseModel):
    """Per-period schedule for one contract item."""

    supplier_id: str
    item_name: str
    unit: str
    total: float
    periods: list[PeriodQuota] = Field(default_factory=list)

    @property
    def total_delivered(self) -> float:
        return sum(p.delivered for p in self.periods)


class ItemBalance(BaseModel):
    """Contracted vs received balance for one normalized item name."""

    normalized_name: str
    name: str
    unit: str
    contracted: float
    received: float  # in contract units
    remaining: float  # max(0, contracted - received)
    in_stock: float  # lot remaining, in delivery measure
    logged_entries: float  # quantity logged by entry movements
    supplier_count: int
    comparable: bool = True
