"""Warehouse movement endpoints: entries, exits, ledger and FIFO lookup."""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_list_movements_use_case,
    get_oldest_lot_use_case,
    get_record_entry_use_case,
    get_record_exit_use_case,
)
from src.application.dto.requests import (
    ListMovementsRequest,
    OldestLotRequest,
    RecordEntryRequest,
    RecordExitRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    MovementListResponse,
    MovementResponse,
    OldestLotResponse,
    RecordExitResponse,
)
from src.application.use_cases import (
    GetOldestLotUseCase,
    ListMovementsUseCase,
    RecordEntryUseCase,
    RecordExitUseCase,
)
from src.core.entities.movement import MovementType

router = APIRouter(prefix="/api/warehouse", tags=["warehouse"])


@router.post(
    "/entries",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def record_entry(
    request: RecordEntryRequest,
    use_case: RecordEntryUseCase = Depends(get_record_entry_use_case),
) -> MovementResponse:
    """Log a scanned lot arriving at the warehouse."""
    movement = await use_case.execute(request)
    return use_case.to_response(movement)


@router.post(
    "/exits",
    response_model=RecordExitResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_exit(
    request: RecordExitRequest,
    use_case: RecordExitUseCase = Depends(get_record_exit_use_case),
) -> RecordExitResponse:
    """
    Withdraw stock from a lot.

    When an older lot of the same item is still in stock and override_fifo
    is false, nothing is written and the response carries the advisory
    (status "fifo_override_required").
    """
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/movements", response_model=MovementListResponse)
async def list_movements(
    movement_type: MovementType | None = None,
    item: str | None = None,
    barcode: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    use_case: ListMovementsUseCase = Depends(get_list_movements_use_case),
) -> MovementListResponse:
    """Ledger listing, newest first."""
    page = await use_case.execute(
        ListMovementsRequest(
            movement_type=movement_type,
            item_name=item,
            barcode=barcode,
            limit=limit,
            offset=offset,
        )
    )
    return use_case.to_response(page)


@router.get(
    "/oldest-lot",
    response_model=OldestLotResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_oldest_lot(
    item: str = Query(..., min_length=1),
    use_case: GetOldestLotUseCase = Depends(get_oldest_lot_use_case),
) -> OldestLotResponse:
    """The lot of an item that should leave first, across all suppliers."""
    lot = await use_case.execute(OldestLotRequest(item_name=item))
    return use_case.to_response(item, lot)
