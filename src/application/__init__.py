"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from src.application.services import (
    LotLockRegistry,
    get_balance_aggregator,
    get_fifo_resolver,
    get_lot_locks,
    get_name_matcher,
    get_quota_allocator,
    reset_services,
)
from src.application.use_cases import (
    CancelDeliveriesUseCase,
    DeleteDeliveryUseCase,
    FulfillDeliveryUseCase,
    GetBalancesUseCase,
    GetOldestLotUseCase,
    GetSupplierQuotasUseCase,
    GetSupplierUseCase,
    ListMovementsUseCase,
    RecordEntryUseCase,
    RecordExitUseCase,
    RegisterLotUseCase,
    RegisterSupplierUseCase,
    ReopenInvoiceUseCase,
    ScheduleDeliveryUseCase,
)

__all__ = [
    # Use Cases
    "RegisterSupplierUseCase",
    "GetSupplierUseCase",
    "GetSupplierQuotasUseCase",
    "ScheduleDeliveryUseCase",
    "FulfillDeliveryUseCase",
    "RegisterLotUseCase",
    "CancelDeliveriesUseCase",
    "ReopenInvoiceUseCase",
    "DeleteDeliveryUseCase",
    "RecordEntryUseCase",
    "RecordExitUseCase",
    "ListMovementsUseCase",
    "GetOldestLotUseCase",
    "GetBalancesUseCase",
    # Services
    "LotLockRegistry",
    "get_name_matcher",
    "get_quota_allocator",
    "get_fifo_resolver",
    "get_balance_aggregator",
    "get_lot_locks",
    "reset_services",
]
