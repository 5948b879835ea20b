"""
Dependency injection container for FastAPI.

Provides store and use case instances to route handlers. Tests replace
any of these through ``app.dependency_overrides``.
"""

from functools import lru_cache

from src.application.services import (
    get_balance_aggregator,
    get_fifo_resolver,
    get_lot_locks,
    get_name_matcher,
    get_quota_allocator,
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
from src.config import Settings, get_settings


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Supplier use cases
def get_register_supplier_use_case() -> RegisterSupplierUseCase:
    return RegisterSupplierUseCase()


def get_supplier_use_case() -> GetSupplierUseCase:
    return GetSupplierUseCase()


def get_supplier_quotas_use_case() -> GetSupplierQuotasUseCase:
    return GetSupplierQuotasUseCase(allocator=get_quota_allocator())


# Delivery use cases
def get_schedule_delivery_use_case() -> ScheduleDeliveryUseCase:
    return ScheduleDeliveryUseCase()


def get_fulfill_delivery_use_case() -> FulfillDeliveryUseCase:
    return FulfillDeliveryUseCase(matcher=get_name_matcher(), locks=get_lot_locks())


def get_register_lot_use_case() -> RegisterLotUseCase:
    return RegisterLotUseCase(locks=get_lot_locks())


def get_cancel_deliveries_use_case() -> CancelDeliveriesUseCase:
    return CancelDeliveriesUseCase()


def get_reopen_invoice_use_case() -> ReopenInvoiceUseCase:
    return ReopenInvoiceUseCase()


def get_delete_delivery_use_case() -> DeleteDeliveryUseCase:
    return DeleteDeliveryUseCase()


# Warehouse use cases
def get_record_entry_use_case() -> RecordEntryUseCase:
    return RecordEntryUseCase()


def get_record_exit_use_case() -> RecordExitUseCase:
    """Exit use case sharing the process-wide lot locks."""
    return RecordExitUseCase(fifo_resolver=get_fifo_resolver(), locks=get_lot_locks())


def get_list_movements_use_case() -> ListMovementsUseCase:
    return ListMovementsUseCase(matcher=get_name_matcher())


def get_oldest_lot_use_case() -> GetOldestLotUseCase:
    return GetOldestLotUseCase(fifo_resolver=get_fifo_resolver())


# Balance use case
def get_balances_use_case() -> GetBalancesUseCase:
    return GetBalancesUseCase(aggregator=get_balance_aggregator())
