"""
Administrative delivery actions: cancel, reopen an invoice, delete.

None of these touch the movement ledger. Movements that referenced a
removed delivery or lot keep their by-value copy of the reference.
"""

from dataclasses import dataclass

from src.application.dto.mappers import delivery_to_response
from src.application.dto.requests import CancelDeliveriesRequest, ReopenInvoiceRequest
from src.application.dto.responses import (
    CancelDeliveriesResponse,
    DeleteDeliveryResponse,
    ReopenInvoiceResponse,
)
from src.config import get_logger
from src.core.entities.delivery import Delivery
from src.core.entities.supplier import Supplier
from src.core.exceptions import (
    DeliveryNotFoundError,
    NotFoundError,
    SupplierNotFoundError,
)
from src.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)


class _LedgerStoreMixin:
    _ledger_store: ILedgerStore | None

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _get_supplier(self, supplier_id: str) -> Supplier:
        store = await self._get_store()
        supplier = await store.get_supplier(supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(supplier_id)
        return supplier


class CancelDeliveriesUseCase(_LedgerStoreMixin):
    """Drop selected deliveries (reserved or fulfilled) of a supplier."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def execute(self, request: CancelDeliveriesRequest) -> int:
        supplier = await self._get_supplier(request.supplier_id)
        owned = {d.id for d in supplier.deliveries}
        for delivery_id in request.delivery_ids:
            if delivery_id not in owned:
                raise DeliveryNotFoundError(delivery_id)

        store = await self._get_store()
        await store.replace_deliveries(supplier.id, list(dict.fromkeys(request.delivery_ids)), [])
        removed = len(set(request.delivery_ids))

        logger.info(
            "deliveries_cancelled",
            supplier_id=supplier.id,
            delivery_ids=request.delivery_ids,
        )
        return removed

    def to_response(self, supplier_id: str, removed: int) -> CancelDeliveriesResponse:
        return CancelDeliveriesResponse(supplier_id=supplier_id, removed=removed)


@dataclass
class ReopenInvoiceResult:
    supplier_id: str
    invoice_number: str
    removed: int
    placeholder: Delivery


class ReopenInvoiceUseCase(_LedgerStoreMixin):
    """
    Undo a fulfillment.

    Every delivery carrying the invoice number is removed and a single
    reserved slot is booked on the earliest of their dates.
    """

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def execute(self, request: ReopenInvoiceRequest) -> ReopenInvoiceResult:
        supplier = await self._get_supplier(request.supplier_id)
        invoice_number = request.invoice_number.strip()

        invoiced = [d for d in supplier.deliveries if d.invoice_number == invoice_number]
        if not invoiced:
            raise NotFoundError("invoice", invoice_number)

        earliest = min(invoiced, key=lambda d: (d.date, d.time))
        placeholder = Delivery(supplier_id=supplier.id, date=earliest.date, time=earliest.time)

        store = await self._get_store()
        added = await store.replace_deliveries(
            supplier.id,
            [d.id for d in invoiced],  # type: ignore[misc]
            [placeholder],
        )

        logger.info(
            "invoice_reopened",
            supplier_id=supplier.id,
            invoice_number=invoice_number,
            removed=len(invoiced),
            placeholder_id=added[0].id,
        )
        return ReopenInvoiceResult(
            supplier_id=supplier.id,
            invoice_number=invoice_number,
            removed=len(invoiced),
            placeholder=added[0],
        )

    def to_response(self, result: ReopenInvoiceResult) -> ReopenInvoiceResponse:
        return ReopenInvoiceResponse(
            supplier_id=result.supplier_id,
            invoice_number=result.invoice_number,
            removed=result.removed,
            placeholder=delivery_to_response(result.placeholder),
        )


class DeleteDeliveryUseCase(_LedgerStoreMixin):
    """Remove one delivery and its lots."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def execute(self, delivery_id: int) -> bool:
        store = await self._get_store()
        delivery = await store.get_delivery(delivery_id)
        if delivery is None:
            raise DeliveryNotFoundError(delivery_id)

        removed = await store.delete_deliveries([delivery_id])
        logger.info(
            "delivery_deleted",
            delivery_id=delivery_id,
            supplier_id=delivery.supplier_id,
            lots=len(delivery.lots),
        )
        return removed > 0

    def to_response(self, delivery_id: int, removed: bool) -> DeleteDeliveryResponse:
        return DeleteDeliveryResponse(delivery_id=delivery_id, removed=removed)
