"""Delivery and lot entities."""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field, model_validator


class Lot(BaseModel):
    """A traceable sub-quantity of a delivery, identified by a scannable code."""

    id: int | None = None
    delivery_id: int | None = None  # FK → deliveries.id
    lot_code: str
    barcode: str = ""
    initial_quantity: float = Field(..., gt=0)
    remaining_quantity: float | None = None
    expiration_date: date | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def fill_defaults(self) -> "Lot":
        """Barcode falls back to the lot code; a new lot is full."""
        if not self.barcode:
            self.barcode = self.lot_code
        if self.remaining_quantity is None:
            self.remaining_quantity = self.initial_quantity
        if self.remaining_quantity < 0 or self.remaining_quantity > self.initial_quantity:
            raise ValueError(
                f"remaining quantity {self.remaining_quantity} outside [0, {self.initial_quantity}]"
            )
        return self

    @property
    def remaining(self) -> float:
        return self.remaining_quantity or 0.0

    @property
    def is_exhausted(self) -> bool:
        return self.remaining <= 0


class Delivery(BaseModel):
    """
    One fulfillment event against a contract item.

    Created as a reserved slot (no item, no invoice) when a supplier books a
    date, and becomes fulfilled once an invoice number and item/quantity are
    attached.
    """

    id: int | None = None
    supplier_id: str
    date: date
    time: str = "00:00"
    item_name: str | None = None  # None while the slot is only reserved
    quantity: float = Field(default=0.0, ge=0)
    value: float = Field(default=0.0, ge=0)
    invoice_number: str | None = None
    invoice_uploaded: bool = False
    remaining_quantity: float | None = None
    lots: list[Lot] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_pending(self) -> bool:
        return not self.invoice_number or not self.item_name

    @property
    def allocated_quantity(self) -> float:
        """Sum of the initial quantities of every lot."""
        return sum(lot.initial_quantity for lot in self.lots)

    @property
    def withdrawn_quantity(self) -> float:
        return sum(lot.initial_quantity - lot.remaining for lot in self.lots)

    @property
    def stock_on_hand(self) -> float:
        return sum(lot.remaining for lot in self.lots)

    @property
    def current_remaining(self) -> float:
        if self.remaining_quantity is None:
            return self.quantity
        return self.remaining_quantity

    def recompute_remaining(self) -> float:
        """Delivery total minus everything withdrawn from its lots."""
        self.remaining_quantity = self.quantity - self.withdrawn_quantity
        return self.remaining_quantity

    def find_lot(self, lot_id: int) -> Lot | None:
        for lot in self.lots:
            if lot.id == lot_id:
                return lot
        return None
