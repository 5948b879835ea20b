"""Get Oldest Lot Use Case — which lot of an item should leave first."""

from src.application.dto.mappers import lot_reference_to_response
from src.application.dto.requests import OldestLotRequest
from src.application.dto.responses import OldestLotResponse
from src.application.services import get_fifo_resolver
from src.core.entities.ledger import LotReference
from src.core.exceptions import ValidationError
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.services.fifo_resolver import FifoResolver


class GetOldestLotUseCase:
    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        fifo_resolver: FifoResolver | None = None,
    ):
        self._ledger_store = ledger_store
        self._fifo_resolver = fifo_resolver

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: OldestLotRequest) -> LotReference | None:
        item_name = request.item_name.strip()
        if not item_name:
            raise ValidationError("item_name", "item name is required")

        store = await self._get_store()
        resolver = self._fifo_resolver or get_fifo_resolver()
        return resolver.oldest_lot(await store.list_suppliers(), item_name)

    def to_response(self, item_name: str, lot: LotReference | None) -> OldestLotResponse:
        return OldestLotResponse(
            item_name=item_name,
            lot=lot_reference_to_response(lot) if lot else None,
        )
