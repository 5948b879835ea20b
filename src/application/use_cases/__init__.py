"""Application use cases."""

from src.application.use_cases.fulfill_delivery import FulfillDeliveryResult, FulfillDeliveryUseCase
from src.application.use_cases.get_balances import GetBalancesUseCase
from src.application.use_cases.get_oldest_lot import GetOldestLotUseCase
from src.application.use_cases.get_quotas import GetSupplierQuotasUseCase, SupplierQuotasResult
from src.application.use_cases.list_movements import ListMovementsUseCase, MovementPage
from src.application.use_cases.manage_deliveries import (
    CancelDeliveriesUseCase,
    DeleteDeliveryUseCase,
    ReopenInvoiceResult,
    ReopenInvoiceUseCase,
)
from src.application.use_cases.record_entry import RecordEntryUseCase
from src.application.use_cases.record_exit import RecordExitResult, RecordExitUseCase
from src.application.use_cases.register_lot import RegisterLotResult, RegisterLotUseCase
from src.application.use_cases.register_supplier import (
    GetSupplierUseCase,
    RegisterSupplierResult,
    RegisterSupplierUseCase,
)
from src.application.use_cases.schedule_delivery import ScheduleDeliveryUseCase

__all__ = [
    "RegisterSupplierUseCase",
    "RegisterSupplierResult",
    "GetSupplierUseCase",
    "GetSupplierQuotasUseCase",
    "SupplierQuotasResult",
    "ScheduleDeliveryUseCase",
    "FulfillDeliveryUseCase",
    "FulfillDeliveryResult",
    "RegisterLotUseCase",
    "RegisterLotResult",
    "CancelDeliveriesUseCase",
    "ReopenInvoiceUseCase",
    "ReopenInvoiceResult",
    "DeleteDeliveryUseCase",
    "RecordEntryUseCase",
    "RecordExitUseCase",
    "RecordExitResult",
    "ListMovementsUseCase",
    "MovementPage",
    "GetOldestLotUseCase",
    "GetBalancesUseCase",
]
