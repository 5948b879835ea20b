"""Get Supplier Quotas Use Case — per-period delivery targets."""

from dataclasses import dataclass

from src.application.dto.requests import SupplierQuotasRequest
from src.application.dto.responses import (
    ContractQuotaResponse,
    PeriodQuotaResponse,
    SupplierQuotasResponse,
)
from src.application.services import get_quota_allocator
from src.core.entities.ledger import ContractQuota
from src.core.entities.supplier import Supplier
from src.core.exceptions import SupplierNotFoundError
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.services.quota_allocator import QuotaAllocator


@dataclass
class SupplierQuotasResult:
    supplier: Supplier
    quotas: list[ContractQuota]


class GetSupplierQuotasUseCase:
    """Quota schedule for every contract item of a supplier."""

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        allocator: QuotaAllocator | None = None,
    ):
        self._ledger_store = ledger_store
        self._allocator = allocator

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: SupplierQuotasRequest) -> SupplierQuotasResult:
        store = await self._get_store()
        supplier = await store.get_supplier(request.supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(request.supplier_id)

        allocator = self._allocator or get_quota_allocator()
        return SupplierQuotasResult(supplier=supplier, quotas=allocator.allocate_supplier(supplier))

    def to_response(self, result: SupplierQuotasResult) -> SupplierQuotasResponse:
        return SupplierQuotasResponse(
            supplier_id=result.supplier.id,
            supplier_name=result.supplier.name,
            quotas=[
                ContractQuotaResponse(
                    item_name=q.item_name,
                    unit=q.unit,
                    total=q.total,
                    total_delivered=q.total_delivered,
                    periods=[
                        PeriodQuotaResponse(**p.model_dump(exclude={"index"}))
                        for p in q.periods
                    ],
                )
                for q in result.quotas
            ],
        )
