"""
Record Exit Use Case — withdraw stock from a lot.

Flow (under the lot's lock):
1. Locate the lot and its delivery/supplier in the current ledger
2. FIFO check: an older lot of the same item stops the exit unless overridden
3. Balance check against the lot's remaining quantity
4. Decrement lot, recompute delivery, append exit movement (one transaction)
"""

from dataclasses import dataclass
from datetime import date

from src.application.dto.mappers import advisory_to_response, movement_to_response
from src.application.dto.requests import RecordExitRequest
from src.application.dto.responses import RecordExitResponse
from src.application.services import LotLockRegistry, get_fifo_resolver, get_lot_locks
from src.config import get_logger
from src.core.entities.delivery import Delivery, Lot
from src.core.entities.ledger import FifoAdvisory
from src.core.entities.movement import MovementType, WarehouseMovement
from src.core.entities.supplier import Supplier
from src.core.exceptions import InsufficientStockError, LotNotFoundError, ValidationError
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.services.fifo_resolver import FifoResolver, lot_reference

logger = get_logger(__name__)


@dataclass
class RecordExitResult:
    """Either the written exit or the advisory that prevented it."""

    movement: WarehouseMovement | None = None
    lot: Lot | None = None
    delivery: Delivery | None = None
    advisory: FifoAdvisory | None = None

    @property
    def recorded(self) -> bool:
        return self.movement is not None

    @property
    def fifo_overridden(self) -> bool:
        return self.recorded and self.advisory is not None


def _locate(suppliers: list[Supplier], lot_id: int) -> tuple[Supplier, Delivery, Lot] | None:
    for supplier in suppliers:
        for delivery in supplier.deliveries:
            lot = delivery.find_lot(lot_id)
            if lot is not None:
                return supplier, delivery, lot
    return None


class RecordExitUseCase:
    """Withdraw a quantity from a scanned lot."""

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        fifo_resolver: FifoResolver | None = None,
        locks: LotLockRegistry | None = None,
    ):
        self._ledger_store = ledger_store
        self._fifo_resolver = fifo_resolver
        self._locks = locks

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: RecordExitRequest) -> RecordExitResult:
        if request.quantity <= 0:
            raise ValidationError("quantity", "must be greater than zero", request.quantity)
        outbound_reference = request.outbound_reference.strip()
        if not outbound_reference:
            raise ValidationError("outbound_reference", "outbound invoice or requisition is required")

        barcode = request.barcode.strip()
        store = await self._get_store()
        resolver = self._fifo_resolver or get_fifo_resolver()
        locks = self._locks or get_lot_locks()

        async with locks.hold(barcode):
            lot = await store.get_lot_by_barcode(barcode)
            if lot is None:
                raise LotNotFoundError(barcode)

            suppliers = await store.list_suppliers()
            located = _locate(suppliers, lot.id)  # type: ignore[arg-type]
            if located is None:
                raise LotNotFoundError(barcode)
            supplier, delivery, lot = located

            advisory = resolver.check_withdrawal(
                suppliers, lot_reference(supplier, delivery, lot)
            )
            if advisory is not None and not request.override_fifo:
                logger.info(
                    "fifo_advisory_raised",
                    barcode=barcode,
                    oldest_barcode=advisory.oldest.barcode,
                )
                return RecordExitResult(advisory=advisory)

            if request.quantity > lot.remaining:
                raise InsufficientStockError(
                    barcode,
                    delivery.item_name or "",
                    request.quantity,
                    lot.remaining,
                )

            movement = WarehouseMovement(
                movement_type=MovementType.EXIT,
                movement_date=request.movement_date or date.today(),
                lot_id=lot.id,  # type: ignore[arg-type]
                lot_code=lot.lot_code,
                barcode=lot.barcode,
                item_name=delivery.item_name or "",
                supplier_id=supplier.id,
                supplier_name=supplier.name,
                delivery_id=delivery.id,  # type: ignore[arg-type]
                inbound_invoice=delivery.invoice_number,
                outbound_reference=outbound_reference,
                quantity=request.quantity,
                expiration_date=lot.expiration_date,
            )
            lot, delivery, movement = await store.apply_withdrawal(
                lot.id,  # type: ignore[arg-type]
                request.quantity,
                movement,
            )

        logger.info(
            "exit_recorded",
            movement_id=movement.id,
            barcode=barcode,
            item=movement.item_name,
            qty=request.quantity,
            lot_remaining=lot.remaining,
            fifo_overridden=advisory is not None,
        )
        return RecordExitResult(movement=movement, lot=lot, delivery=delivery, advisory=advisory)

    def to_response(self, result: RecordExitResult) -> RecordExitResponse:
        if not result.recorded:
            return RecordExitResponse(
                status="fifo_override_required",
                advisory=advisory_to_response(result.advisory),  # type: ignore[arg-type]
            )
        return RecordExitResponse(
            status="recorded",
            movement=movement_to_response(result.movement),  # type: ignore[arg-type]
            lot_remaining=result.lot.remaining if result.lot else None,
            delivery_remaining=result.delivery.current_remaining if result.delivery else None,
            advisory=advisory_to_response(result.advisory) if result.advisory else None,
            fifo_overridden=result.fifo_overridden,
        )
