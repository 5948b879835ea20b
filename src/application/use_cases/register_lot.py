"""Register Lot Use Case — split a fulfilled delivery into a traceable lot."""

from contextlib import nullcontext
from dataclasses import dataclass

from src.application.dto.mappers import lot_to_response
from src.application.dto.requests import RegisterLotRequest
from src.application.dto.responses import LotResponse
from src.application.services import LotLockRegistry, get_balance_aggregator, get_lot_locks
from src.config import get_logger, get_settings
from src.core.entities.delivery import Delivery, Lot
from src.core.exceptions import (
    ContractBalanceExceededError,
    DeliveryNotFoundError,
    DuplicateBarcodeError,
    OverAllocationError,
    ValidationError,
)
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.services.balance_aggregator import BalanceAggregator

logger = get_logger(__name__)


@dataclass
class RegisterLotResult:
    lot: Lot
    delivery: Delivery

    @property
    def allocated_after(self) -> float:
        return self.delivery.allocated_quantity + self.lot.initial_quantity


class RegisterLotUseCase:
    """
    Register a lot against a delivery.

    The sum of a delivery's lot quantities may exceed the delivered quantity
    by at most the configured tolerance (LEDGER_LOT_TOLERANCE). With
    LEDGER_ENFORCE_CONTRACT_BALANCE on, a lot is also refused when it would
    push the item's received total, across every supplier, above what was
    contracted.
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        locks: LotLockRegistry | None = None,
        tolerance: float | None = None,
        aggregator: BalanceAggregator | None = None,
        enforce_contract_balance: bool | None = None,
    ):
        self._ledger_store = ledger_store
        self._locks = locks
        self._tolerance = tolerance
        self._aggregator = aggregator
        self._enforce_contract_balance = enforce_contract_balance

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    @property
    def tolerance(self) -> float:
        if self._tolerance is None:
            self._tolerance = get_settings().ledger.lot_tolerance
        return self._tolerance

    @property
    def enforce_contract_balance(self) -> bool:
        if self._enforce_contract_balance is None:
            self._enforce_contract_balance = get_settings().ledger.enforce_contract_balance
        return self._enforce_contract_balance

    async def _check_contract_balance(
        self, store: ILedgerStore, delivery: Delivery, quantity: float
    ) -> None:
        snapshot = await store.snapshot()
        aggregator = self._aggregator or get_balance_aggregator()
        balance = aggregator.balance_for(snapshot, delivery.item_name)
        if balance is None or not balance.comparable:
            return

        supplier = next((s for s in snapshot.suppliers if s.id == delivery.supplier_id), None)
        item = supplier.contract_item(delivery.item_name or "") if supplier else None
        factor = item.unit_descriptor.weight_factor if item else 0.0
        if factor <= 0:
            return

        requested = quantity / factor
        if requested > balance.remaining + self.tolerance:
            raise ContractBalanceExceededError(
                item_name=delivery.item_name or "",
                requested=requested,
                remaining=balance.remaining,
                unit=balance.unit,
            )

    async def execute(self, request: RegisterLotRequest) -> RegisterLotResult:
        if request.initial_quantity <= 0:
            raise ValidationError("initial_quantity", "must be greater than zero", request.initial_quantity)

        lot_code = request.lot_code.strip()
        if not lot_code:
            raise ValidationError("lot_code", "lot code is required")
        barcode = (request.barcode or "").strip() or lot_code
        locks = self._locks or get_lot_locks()
        store = await self._get_store()

        # Lots of one delivery are validated and written one at a time
        async with locks.hold(f"delivery:{request.delivery_id}"):
            delivery = await store.get_delivery(request.delivery_id)
            if delivery is None:
                raise DeliveryNotFoundError(request.delivery_id)
            if delivery.is_pending:
                raise ValidationError(
                    "delivery_id",
                    "delivery has no invoice or item yet",
                    request.delivery_id,
                )

            existing = await store.get_lot_by_barcode(barcode)
            if existing is not None:
                raise DuplicateBarcodeError(barcode, existing.id)  # type: ignore[arg-type]

            allocated = delivery.allocated_quantity
            if allocated + request.initial_quantity > delivery.quantity + self.tolerance:
                raise OverAllocationError(
                    delivery_id=delivery.id,  # type: ignore[arg-type]
                    item_name=delivery.item_name,
                    allocated=allocated,
                    requested=request.initial_quantity,
                    delivered=delivery.quantity,
                )

            # Contract totals span deliveries, so enforced checks run one at a time
            guard = locks.hold("contract-balance") if self.enforce_contract_balance else nullcontext()
            async with guard:
                if self.enforce_contract_balance:
                    await self._check_contract_balance(store, delivery, request.initial_quantity)
                lot = await store.add_lot(
                    Lot(
                        delivery_id=delivery.id,
                        lot_code=lot_code,
                        barcode=barcode,
                        initial_quantity=request.initial_quantity,
                        expiration_date=request.expiration_date,
                    )
                )

        logger.info(
            "lot_registered",
            lot_id=lot.id,
            delivery_id=delivery.id,
            item=delivery.item_name,
            barcode=lot.barcode,
            qty=lot.initial_quantity,
            allocated=allocated + lot.initial_quantity,
            delivered=delivery.quantity,
        )
        return RegisterLotResult(lot=lot, delivery=delivery)

    def to_response(self, result: RegisterLotResult) -> LotResponse:
        return lot_to_response(result.lot)
