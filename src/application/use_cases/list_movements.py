"""List Movements Use Case — read the warehouse ledger."""

from dataclasses import dataclass

from src.application.dto.mappers import movement_to_response
from src.application.dto.requests import ListMovementsRequest
from src.application.dto.responses import MovementListResponse
from src.application.services import get_name_matcher
from src.core.entities.movement import WarehouseMovement
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.services.name_normalizer import NameMatcher


@dataclass
class MovementPage:
    movements: list[WarehouseMovement]
    total: int
    limit: int
    offset: int


class ListMovementsUseCase:
    """
    Newest-first ledger listing.

    Item names are matched with the shared name policy, so filtering and
    paging happen here rather than in SQL.
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        matcher: NameMatcher | None = None,
    ):
        self._ledger_store = ledger_store
        self._matcher = matcher

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: ListMovementsRequest) -> MovementPage:
        store = await self._get_store()
        matcher = self._matcher or get_name_matcher()

        movements = await store.list_movements(movement_type=request.movement_type, limit=None)
        if request.barcode:
            barcode = request.barcode.strip()
            movements = [m for m in movements if m.barcode == barcode]
        if request.item_name:
            key = matcher.key(request.item_name)
            movements = [m for m in movements if matcher.matches_key(key, m.item_name)]

        page = movements[request.offset : request.offset + request.limit]
        return MovementPage(
            movements=page,
            total=len(movements),
            limit=request.limit,
            offset=request.offset,
        )

    def to_response(self, page: MovementPage) -> MovementListResponse:
        return MovementListResponse(
            movements=[movement_to_response(m) for m in page.movements],
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.offset + len(page.movements) < page.total,
        )
