"""Delivery administration and lot registration endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_delete_delivery_use_case, get_register_lot_use_case
from src.application.dto.requests import RegisterLotRequest
from src.application.dto.responses import DeleteDeliveryResponse, ErrorResponse, LotResponse
from src.application.use_cases import DeleteDeliveryUseCase, RegisterLotUseCase

router = APIRouter(prefix="/api/deliveries", tags=["deliveries"])


@router.delete(
    "/{delivery_id}",
    response_model=DeleteDeliveryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_delivery(
    delivery_id: int,
    use_case: DeleteDeliveryUseCase = Depends(get_delete_delivery_use_case),
) -> DeleteDeliveryResponse:
    """Remove a delivery and its lots. Ledger movements are kept."""
    removed = await use_case.execute(delivery_id)
    return use_case.to_response(delivery_id, removed)


@router.post(
    "/{delivery_id}/lots",
    response_model=LotResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def register_lot(
    delivery_id: int,
    request: RegisterLotRequest,
    use_case: RegisterLotUseCase = Depends(get_register_lot_use_case),
) -> LotResponse:
    """Register a lot; lot quantities may not exceed the delivered quantity."""
    request.delivery_id = delivery_id
    result = await use_case.execute(request)
    return use_case.to_response(result)
