"""Schedule Delivery Use Case — reserve a delivery slot."""

import re

from src.application.dto.mappers import delivery_to_response
from src.application.dto.requests import ScheduleDeliveryRequest
from src.application.dto.responses import DeliveryResponse
from src.config import get_logger
from src.core.entities.delivery import Delivery
from src.core.exceptions import SupplierNotFoundError, ValidationError
from src.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)

_TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):[0-5]\d")


class ScheduleDeliveryUseCase:
    """Book a date for a supplier; no item or invoice yet."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: ScheduleDeliveryRequest) -> Delivery:
        if not _TIME_PATTERN.fullmatch(request.time):
            raise ValidationError("time", "expected HH:MM", request.time)

        store = await self._get_store()
        supplier = await store.get_supplier(request.supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(request.supplier_id)

        delivery = await store.add_delivery(
            Delivery(
                supplier_id=supplier.id,
                date=request.date,
                time=request.time,
            )
        )

        logger.info(
            "delivery_scheduled",
            supplier_id=supplier.id,
            delivery_id=delivery.id,
            date=delivery.date.isoformat(),
        )
        return delivery

    def to_response(self, delivery: Delivery) -> DeliveryResponse:
        return delivery_to_response(delivery)
