"""Record Entry Use Case — log a lot arriving at the warehouse."""

from datetime import date

from src.application.dto.mappers import movement_to_response
from src.application.dto.requests import RecordEntryRequest
from src.application.dto.responses import MovementResponse
from src.config import get_logger
from src.core.entities.movement import MovementType, WarehouseMovement
from src.core.exceptions import DeliveryNotFoundError, LotNotFoundError
from src.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)


class RecordEntryUseCase:
    """
    Append an entry movement for a scanned lot.

    The movement logs the lot's full initial quantity against the inbound
    invoice of its delivery. Lot quantities are not changed.
    """

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: RecordEntryRequest) -> WarehouseMovement:
        barcode = request.barcode.strip()
        store = await self._get_store()

        lot = await store.get_lot_by_barcode(barcode)
        if lot is None:
            raise LotNotFoundError(barcode)

        delivery = await store.get_delivery(lot.delivery_id)  # type: ignore[arg-type]
        if delivery is None:
            raise DeliveryNotFoundError(lot.delivery_id)  # type: ignore[arg-type]
        supplier = await store.get_supplier(delivery.supplier_id)
        supplier_name = supplier.name if supplier else delivery.supplier_id

        movement = await store.append_movement(
            WarehouseMovement(
                movement_type=MovementType.ENTRY,
                movement_date=request.document_date or date.today(),
                lot_id=lot.id,  # type: ignore[arg-type]
                lot_code=lot.lot_code,
                barcode=lot.barcode,
                item_name=delivery.item_name or "",
                supplier_id=delivery.supplier_id,
                supplier_name=supplier_name,
                delivery_id=delivery.id,  # type: ignore[arg-type]
                inbound_invoice=delivery.invoice_number,
                quantity=lot.initial_quantity,
                expiration_date=lot.expiration_date,
            )
        )

        logger.info(
            "entry_recorded",
            movement_id=movement.id,
            barcode=barcode,
            item=movement.item_name,
            qty=movement.quantity,
        )
        return movement

    def to_response(self, movement: WarehouseMovement) -> MovementResponse:
        return movement_to_response(movement)
