"""Get Balances Use Case — contracted vs received per item."""

from src.application.dto.requests import BalanceRequest
from src.application.dto.responses import BalanceListResponse, ItemBalanceResponse
from src.application.services import get_balance_aggregator
from src.config import get_logger
from src.core.entities.ledger import ItemBalance
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.services.balance_aggregator import BalanceAggregator

logger = get_logger(__name__)


class GetBalancesUseCase:
    """Balances recomputed from a fresh snapshot on every call."""

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        aggregator: BalanceAggregator | None = None,
    ):
        self._ledger_store = ledger_store
        self._aggregator = aggregator

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: BalanceRequest) -> list[ItemBalance]:
        store = await self._get_store()
        aggregator = self._aggregator or get_balance_aggregator()

        snapshot = await store.snapshot()
        item_filter = (request.item_name or "").strip() or None
        return aggregator.get_balances(snapshot, item_filter)

    def to_response(
        self,
        balances: list[ItemBalance],
        item_filter: str | None = None,
    ) -> BalanceListResponse:
        return BalanceListResponse(
            balances=[ItemBalanceResponse(**b.model_dump()) for b in balances],
            total=len(balances),
            item_filter=item_filter,
        )
