"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    BalanceRequest,
    CancelDeliveriesRequest,
    ContractItemRequest,
    FulfillDeliveryRequest,
    FulfillItemRequest,
    ListMovementsRequest,
    OldestLotRequest,
    RecordEntryRequest,
    RecordExitRequest,
    RegisterLotRequest,
    RegisterSupplierRequest,
    ReopenInvoiceRequest,
    ScheduleDeliveryRequest,
    SupplierQuotasRequest,
)
from src.application.dto.responses import (
    BalanceListResponse,
    CancelDeliveriesResponse,
    ContractItemResponse,
    ContractQuotaResponse,
    DeleteDeliveryResponse,
    DeliveryResponse,
    ErrorResponse,
    FifoAdvisoryResponse,
    FulfillDeliveryResponse,
    HealthResponse,
    ItemBalanceResponse,
    LotReferenceResponse,
    LotResponse,
    MovementListResponse,
    MovementResponse,
    OldestLotResponse,
    PaginatedResponse,
    PeriodQuotaResponse,
    ProviderHealthResponse,
    RecordExitResponse,
    ReopenInvoiceResponse,
    SupplierListResponse,
    SupplierQuotasResponse,
    SupplierResponse,
)

__all__ = [
    # Requests
    "ContractItemRequest",
    "RegisterSupplierRequest",
    "ScheduleDeliveryRequest",
    "FulfillItemRequest",
    "FulfillDeliveryRequest",
    "CancelDeliveriesRequest",
    "ReopenInvoiceRequest",
    "RegisterLotRequest",
    "RecordEntryRequest",
    "RecordExitRequest",
    "ListMovementsRequest",
    "OldestLotRequest",
    "BalanceRequest",
    "SupplierQuotasRequest",
    # Responses
    "ErrorResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "PaginatedResponse",
    "ContractItemResponse",
    "LotResponse",
    "DeliveryResponse",
    "SupplierResponse",
    "SupplierListResponse",
    "PeriodQuotaResponse",
    "ContractQuotaResponse",
    "SupplierQuotasResponse",
    "FulfillDeliveryResponse",
    "CancelDeliveriesResponse",
    "ReopenInvoiceResponse",
    "DeleteDeliveryResponse",
    "MovementResponse",
    "MovementListResponse",
    "LotReferenceResponse",
    "FifoAdvisoryResponse",
    "RecordExitResponse",
    "OldestLotResponse",
    "ItemBalanceResponse",
    "BalanceListResponse",
]
