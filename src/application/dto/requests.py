"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Quantities are left unconstrained here; the use cases reject non-positive
values with a domain ValidationError.
"""

import datetime
from datetime import date

from pydantic import BaseModel, Field

from src.core.entities.movement import MovementType


# --- Suppliers ---


class ContractItemRequest(BaseModel):
    """A contract line item."""

    name: str = Field(..., min_length=1, description="Item name as written in the contract")
    total_quantity: float = Field(..., ge=0, description="Contracted quantity in contract units")
    unit: str = Field(
        default="kg-1",
        description="Unit descriptor '<type>-<factor>'",
        examples=["kg-1", "saco-5", "caixa-12", "dz-1"],
    )
    unit_price: float = Field(default=0.0, ge=0, description="Price per contract unit")
    category: str | None = Field(default=None, description="Item category")
    siafem_code: str | None = Field(default=None, description="SIAFEM catalog code")
    compras_code: str | None = Field(default=None, description="Procurement catalog code")


class RegisterSupplierRequest(BaseModel):
    """Register a supplier together with its contract."""

    id: str = Field(..., min_length=1, description="Tax id (CPF/CNPJ)")
    name: str = Field(..., min_length=1, description="Supplier name")
    allowed_weeks: list[int] = Field(
        default_factory=list,
        description="Weeks of the month the supplier may deliver",
        examples=[[1, 3]],
    )
    contract_items: list[ContractItemRequest] = Field(default_factory=list)


# --- Deliveries ---


class ScheduleDeliveryRequest(BaseModel):
    """Reserve a delivery slot."""

    supplier_id: str = Field(default="", description="Supplier id (taken from the path)")
    date: datetime.date = Field(..., description="Delivery date")
    time: str = Field(default="00:00", description="Delivery time HH:MM")


class FulfillItemRequest(BaseModel):
    """One delivered item; lines without a name or quantity are skipped."""

    name: str = Field(default="", description="Contract item name")
    quantity: float = Field(default=0.0, description="Delivered quantity (kg, L, Dz or Un)")


class FulfillDeliveryRequest(BaseModel):
    """Attach an invoice and delivered items to reserved slots."""

    supplier_id: str = Field(default="", description="Supplier id (taken from the path)")
    slot_ids: list[int] = Field(..., min_length=1, description="Reserved delivery ids to replace")
    invoice_number: str = Field(default="", description="Fiscal invoice number (NF)")
    items: list[FulfillItemRequest] = Field(default_factory=list)
    invoice_uploaded: bool = Field(default=False, description="Invoice document attached")


class CancelDeliveriesRequest(BaseModel):
    """Drop deliveries of a supplier."""

    supplier_id: str = Field(default="", description="Supplier id (taken from the path)")
    delivery_ids: list[int] = Field(..., min_length=1)


class ReopenInvoiceRequest(BaseModel):
    """Undo a fulfillment back to a single reserved slot."""

    supplier_id: str
    invoice_number: str


class RegisterLotRequest(BaseModel):
    """Split part of a delivery into a traceable lot."""

    delivery_id: int = Field(default=0, description="Delivery id (taken from the path)")
    lot_code: str = Field(..., min_length=1, description="Lot code printed by the supplier")
    initial_quantity: float = Field(..., description="Lot quantity in delivery measure")
    barcode: str | None = Field(default=None, description="Scannable code; defaults to the lot code")
    expiration_date: date | None = Field(default=None, description="Best before date")


# --- Warehouse ---


class RecordEntryRequest(BaseModel):
    """Log a lot arriving at the warehouse."""

    barcode: str = Field(..., min_length=1, description="Scanned lot barcode")
    document_date: date | None = Field(
        default=None,
        description="Date of the entry document (defaults to today)",
    )


class RecordExitRequest(BaseModel):
    """Withdraw stock from a lot."""

    barcode: str = Field(..., min_length=1, description="Scanned lot barcode")
    outbound_reference: str = Field(
        default="",
        description="Outbound invoice or requisition number",
    )
    quantity: float = Field(..., description="Quantity to withdraw")
    override_fifo: bool = Field(
        default=False,
        description="Proceed even when an older lot of the item is in stock",
    )
    movement_date: date | None = Field(default=None, description="Exit date (defaults to today)")


class ListMovementsRequest(BaseModel):
    """Filter the movement ledger."""

    movement_type: MovementType | None = None
    item_name: str | None = Field(default=None, description="Item name, matched loosely")
    barcode: str | None = None
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)


class OldestLotRequest(BaseModel):
    item_name: str = Field(..., min_length=1)


class BalanceRequest(BaseModel):
    item_name: str | None = Field(default=None, description="Optional item filter")


class SupplierQuotasRequest(BaseModel):
    supplier_id: str
