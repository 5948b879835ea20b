"""Contracted vs received balance endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_balances_use_case
from src.application.dto.requests import BalanceRequest
from src.application.dto.responses import BalanceListResponse
from src.application.use_cases import GetBalancesUseCase

router = APIRouter(prefix="/api/balances", tags=["balances"])


@router.get("", response_model=BalanceListResponse)
async def get_balances(
    item: str | None = None,
    use_case: GetBalancesUseCase = Depends(get_balances_use_case),
) -> BalanceListResponse:
    """Balances per normalized item name, optionally filtered by item."""
    balances = await use_case.execute(BalanceRequest(item_name=item))
    return use_case.to_response(balances, item)
