"""
Supplier and contract item entities.

A supplier holds a supply contract made of line items, and the deliveries
booked against it. Contract quantities are expressed in the item's unit
descriptor ("<type>-<factor>", e.g. ``caixa-12`` for a box of 12 liters).
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator

from src.core.entities.delivery import Delivery
from src.core.exceptions import ValidationError

# Package types whose factor is a per-package weight (kg)
WEIGHT_PACKAGES = frozenset({"saco", "balde", "pacote", "pote"})
# Package types whose factor is a per-package volume (liters)
VOLUME_PACKAGES = frozenset({"litro", "l", "caixa", "embalagem"})
PLAIN_WEIGHT = frozenset({"kg", "un"})
DOZEN = "dz"

DEFAULT_UNIT = "kg-1"


class UnitDescriptor(BaseModel):
    """Parsed unit descriptor: a type tag plus a per-unit conversion factor."""

    unit_type: str = "kg"
    factor: float = 1.0

    @classmethod
    def parse(cls, raw: str | None) -> "UnitDescriptor":
        """Parse ``"<type>-<factor>"``; a missing or unreadable factor means 1."""
        text = (raw or DEFAULT_UNIT).strip().lower()
        unit_type, _, factor_text = text.partition("-")
        try:
            factor = float(factor_text.replace(",", "."))
        except ValueError:
            factor = 1.0
        if factor != factor:  # NaN
            factor = 1.0
        if factor < 0:
            raise ValidationError("unit", "conversion factor must be non-negative", raw)
        return cls(unit_type=unit_type or "kg", factor=factor)

    @property
    def is_dozen(self) -> bool:
        return self.unit_type == DOZEN

    @property
    def measure_label(self) -> str:
        """Label of the quantity a delivery is measured in."""
        if self.unit_type in PLAIN_WEIGHT or self.unit_type in WEIGHT_PACKAGES:
            return "Kg"
        if self.unit_type in VOLUME_PACKAGES:
            return "L"
        if self.is_dozen:
            return "Dz"
        return "Un"

    @property
    def weight_factor(self) -> float:
        """Contract units to weight/volume. Dozens have no weight equivalence."""
        if self.is_dozen:
            return 0.0
        return self.factor

    def measure_quantity(self, contract_quantity: float) -> float:
        """Express a contract quantity in delivery measure (kg, L, Dz or Un)."""
        if self.unit_type in WEIGHT_PACKAGES or self.unit_type in VOLUME_PACKAGES:
            return contract_quantity * self.factor
        return contract_quantity

    def price_per_measure(self, unit_price: float) -> float:
        """Contract price per package turned into a price per kg/L."""
        packaged = self.unit_type in WEIGHT_PACKAGES or self.unit_type in VOLUME_PACKAGES
        if packaged and self.factor > 0:
            return unit_price / self.factor
        return unit_price


class ContractItem(BaseModel):
    """A line item of a supply contract."""

    name: str
    total_quantity: float = Field(default=0.0, ge=0)
    unit: str = DEFAULT_UNIT
    unit_price: float = Field(default=0.0, ge=0)
    position: int = 0  # insertion order, used for presentation
    category: str | None = None
    siafem_code: str | None = None
    compras_code: str | None = None

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v: str) -> str:
        try:
            UnitDescriptor.parse(v)
        except ValidationError as e:
            raise ValueError(e.message) from e
        return v or DEFAULT_UNIT

    @property
    def unit_descriptor(self) -> UnitDescriptor:
        return UnitDescriptor.parse(self.unit)

    @property
    def total_value(self) -> float:
        return self.total_quantity * self.unit_price


class Supplier(BaseModel):
    """A contracted supplier with its items and booked deliveries."""

    id: str  # tax id (CPF/CNPJ)
    name: str
    allowed_weeks: list[int] = Field(default_factory=list)
    contract_items: list[ContractItem] = Field(default_factory=list)
    deliveries: list[Delivery] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def contract_item(self, name: str) -> ContractItem | None:
        """Contract item with exactly this name, if any."""
        for item in self.contract_items:
            if item.name == name:
                return item
        return None

    def deliveries_for(self, item_name: str) -> list[Delivery]:
        return [d for d in self.deliveries if d.item_name == item_name]

    @property
    def contracted_value(self) -> float:
        return sum(item.total_value for item in self.contract_items)

    @property
    def delivered_value(self) -> float:
        return sum(d.value for d in self.deliveries)
