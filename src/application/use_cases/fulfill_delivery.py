"""
Fulfill Delivery Use Case.

Turns reserved slots into fulfilled deliveries, one per delivered item,
priced from the supplier's contract.
"""

from dataclasses import dataclass, field

from src.application.dto.mappers import delivery_to_response
from src.application.dto.requests import FulfillDeliveryRequest, FulfillItemRequest
from src.application.dto.responses import FulfillDeliveryResponse
from src.application.services import LotLockRegistry, get_lot_locks, get_name_matcher
from src.config import get_logger
from src.core.entities.delivery import Delivery
from src.core.entities.supplier import ContractItem, Supplier
from src.core.exceptions import (
    DeliveryNotFoundError,
    ItemNotUnderContractError,
    SupplierNotFoundError,
    ValidationError,
)
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.services.name_normalizer import NameMatcher

logger = get_logger(__name__)


@dataclass
class FulfillDeliveryResult:
    """Result of fulfilling reserved slots."""

    supplier_id: str
    invoice_number: str
    removed_slot_ids: list[int] = field(default_factory=list)
    deliveries: list[Delivery] = field(default_factory=list)

    @property
    def total_value(self) -> float:
        return sum(d.value for d in self.deliveries)


class FulfillDeliveryUseCase:
    """
    Attach an invoice and delivered items to reserved delivery slots.

    Flow:
    1. Validate invoice number and item lines
    2. Resolve every item against the supplier's contract
    3. Replace the slots with one priced delivery per item
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        matcher: NameMatcher | None = None,
        locks: LotLockRegistry | None = None,
    ):
        self._ledger_store = ledger_store
        self._matcher = matcher
        self._locks = locks

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    def _get_matcher(self) -> NameMatcher:
        if self._matcher is None:
            self._matcher = get_name_matcher()
        return self._matcher

    def _resolve_item(self, supplier: Supplier, name: str) -> ContractItem:
        """Exact contract name first, then the same normalized key."""
        item = supplier.contract_item(name)
        if item is not None:
            return item
        key = self._get_matcher().key(name)
        for candidate in supplier.contract_items:
            if self._get_matcher().key(candidate.name) == key:
                return candidate
        raise ItemNotUnderContractError(supplier.id, name)

    async def execute(self, request: FulfillDeliveryRequest) -> FulfillDeliveryResult:
        invoice_number = request.invoice_number.strip()
        if not invoice_number:
            raise ValidationError("invoice_number", "invoice number is required")

        lines = [i for i in request.items if i.name.strip() and i.quantity > 0]
        if not lines:
            raise ValidationError("items", "at least one item with quantity greater than zero")

        store = await self._get_store()
        locks = self._locks or get_lot_locks()

        # Slots of one supplier are checked and replaced one request at a time
        async with locks.hold(f"supplier:{request.supplier_id}"):
            supplier, removed, deliveries = await self._replace_slots(
                store, request, invoice_number, lines
            )

        result = FulfillDeliveryResult(
            supplier_id=supplier.id,
            invoice_number=invoice_number,
            removed_slot_ids=removed,
            deliveries=deliveries,
        )
        logger.info(
            "delivery_fulfilled",
            supplier_id=supplier.id,
            invoice_number=invoice_number,
            items=len(deliveries),
            total_value=result.total_value,
        )
        return result

    async def _replace_slots(
        self,
        store: ILedgerStore,
        request: FulfillDeliveryRequest,
        invoice_number: str,
        lines: list[FulfillItemRequest],
    ) -> tuple[Supplier, list[int], list[Delivery]]:
        supplier = await store.get_supplier(request.supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(request.supplier_id)

        slots = {d.id: d for d in supplier.deliveries}
        for slot_id in request.slot_ids:
            slot = slots.get(slot_id)
            if slot is None:
                raise DeliveryNotFoundError(slot_id)
            if not slot.is_pending:
                raise ValidationError("slot_ids", "delivery is already fulfilled", slot_id)

        first_slot = slots[request.slot_ids[0]]
        deliveries = []
        for line in lines:
            item = self._resolve_item(supplier, line.name.strip())
            unit = item.unit_descriptor
            deliveries.append(
                Delivery(
                    supplier_id=supplier.id,
                    date=first_slot.date,
                    time=first_slot.time,
                    item_name=item.name,
                    quantity=line.quantity,
                    value=line.quantity * unit.price_per_measure(item.unit_price),
                    invoice_number=invoice_number,
                    invoice_uploaded=request.invoice_uploaded,
                    remaining_quantity=line.quantity,
                )
            )

        removed = list(dict.fromkeys(request.slot_ids))
        deliveries = await store.replace_deliveries(supplier.id, removed, deliveries)
        return supplier, removed, deliveries

    def to_response(self, result: FulfillDeliveryResult) -> FulfillDeliveryResponse:
        return FulfillDeliveryResponse(
            supplier_id=result.supplier_id,
            invoice_number=result.invoice_number,
            removed_slot_ids=result.removed_slot_ids,
            deliveries=[delivery_to_response(d) for d in result.deliveries],
            total_value=result.total_value,
        )
