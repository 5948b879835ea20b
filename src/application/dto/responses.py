"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. OVER_ALLOCATION)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


class ProviderHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class PaginatedResponse(BaseModel):
    """Base for paginated responses."""

    total: int
    limit: int
    offset: int
    has_more: bool


# --- Suppliers ---


class ContractItemResponse(BaseModel):
    name: str
    total_quantity: float
    unit: str = Field(..., description="Unit descriptor as contracted")
    measure_unit: str = Field(..., description="Delivery measure: Kg, L, Dz or Un")
    unit_price: float
    total_value: float
    position: int
    category: str | None = None
    siafem_code: str | None = None
    compras_code: str | None = None


class LotResponse(BaseModel):
    id: int
    delivery_id: int
    lot_code: str
    barcode: str
    initial_quantity: float
    remaining_quantity: float
    expiration_date: date | None = None
    created_at: datetime


class DeliveryResponse(BaseModel):
    """A delivery; reserved slots carry the pending label as item name."""

    id: int
    supplier_id: str
    date: date
    time: str
    item_name: str
    pending: bool
    quantity: float
    value: float
    invoice_number: str | None = None
    invoice_uploaded: bool = False
    remaining_quantity: float
    allocated_quantity: float = Field(..., description="Sum of lot initial quantities")
    lots: list[LotResponse] = Field(default_factory=list)


class SupplierResponse(BaseModel):
    id: str
    name: str
    allowed_weeks: list[int] = Field(default_factory=list)
    contract_items: list[ContractItemResponse] = Field(default_factory=list)
    deliveries: list[DeliveryResponse] = Field(default_factory=list)
    contracted_value: float
    delivered_value: float
    created_at: datetime


class SupplierListResponse(BaseModel):
    suppliers: list[SupplierResponse]
    total: int


class PeriodQuotaResponse(BaseModel):
    label: str
    start: date
    end: date
    base_target: float
    carried_deficit: float
    adjusted_target: float
    delivered: float
    remaining: float
    target_value: float
    delivered_value: float


class ContractQuotaResponse(BaseModel):
    item_name: str
    unit: str
    total: float
    total_delivered: float
    periods: list[PeriodQuotaResponse]


class SupplierQuotasResponse(BaseModel):
    supplier_id: str
    supplier_name: str
    quotas: list[ContractQuotaResponse]


class FulfillDeliveryResponse(BaseModel):
    supplier_id: str
    invoice_number: str
    removed_slot_ids: list[int]
    deliveries: list[DeliveryResponse]
    total_value: float


class CancelDeliveriesResponse(BaseModel):
    supplier_id: str
    removed: int


class ReopenInvoiceResponse(BaseModel):
    supplier_id: str
    invoice_number: str
    removed: int
    placeholder: DeliveryResponse


class DeleteDeliveryResponse(BaseModel):
    delivery_id: int
    removed: bool


# --- Warehouse ---


class MovementResponse(BaseModel):
    id: int
    movement_type: str
    timestamp: datetime
    movement_date: date
    lot_id: int
    lot_code: str
    barcode: str
    item_name: str
    supplier_id: str
    supplier_name: str
    delivery_id: int
    inbound_invoice: str | None = None
    outbound_reference: str | None = None
    quantity: float
    expiration_date: date | None = None


class MovementListResponse(PaginatedResponse):
    movements: list[MovementResponse]


class LotReferenceResponse(BaseModel):
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


class FifoAdvisoryResponse(BaseModel):
    item_name: str
    message: str
    requested: LotReferenceResponse
    oldest: LotReferenceResponse


class RecordExitResponse(BaseModel):
    """Either a recorded exit or the advisory that stopped it."""

    status: str = Field(..., description="'recorded' or 'fifo_override_required'")
    movement: MovementResponse | None = None
    lot_remaining: float | None = None
    delivery_remaining: float | None = None
    advisory: FifoAdvisoryResponse | None = None
    fifo_overridden: bool = False


class OldestLotResponse(BaseModel):
    item_name: str
    lot: LotReferenceResponse | None = None


class ItemBalanceResponse(BaseModel):
    normalized_name: str
    name: str
    unit: str
    contracted: float
    received: float
    remaining: float
    in_stock: float
    logged_entries: float
    supplier_count: int
    comparable: bool


class BalanceListResponse(BaseModel):
    balances: list[ItemBalanceResponse]
    total: int
    item_filter: str | None = None
