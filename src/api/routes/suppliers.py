"""Supplier, contract and delivery scheduling endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_cancel_deliveries_use_case,
    get_fulfill_delivery_use_case,
    get_register_supplier_use_case,
    get_reopen_invoice_use_case,
    get_schedule_delivery_use_case,
    get_supplier_quotas_use_case,
    get_supplier_use_case,
)
from src.application.dto.requests import (
    CancelDeliveriesRequest,
    FulfillDeliveryRequest,
    RegisterSupplierRequest,
    ReopenInvoiceRequest,
    ScheduleDeliveryRequest,
    SupplierQuotasRequest,
)
from src.application.dto.responses import (
    CancelDeliveriesResponse,
    DeliveryResponse,
    ErrorResponse,
    FulfillDeliveryResponse,
    ReopenInvoiceResponse,
    SupplierListResponse,
    SupplierQuotasResponse,
    SupplierResponse,
)
from src.application.use_cases import (
    CancelDeliveriesUseCase,
    FulfillDeliveryUseCase,
    GetSupplierQuotasUseCase,
    GetSupplierUseCase,
    RegisterSupplierUseCase,
    ReopenInvoiceUseCase,
    ScheduleDeliveryUseCase,
)

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def register_supplier(
    request: RegisterSupplierRequest,
    use_case: RegisterSupplierUseCase = Depends(get_register_supplier_use_case),
) -> SupplierResponse:
    """Register a supplier with its contract items."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=SupplierListResponse)
async def list_suppliers(
    use_case: GetSupplierUseCase = Depends(get_supplier_use_case),
) -> SupplierListResponse:
    suppliers = await use_case.list_all()
    return use_case.list_to_response(suppliers)


@router.get(
    "/{supplier_id}",
    response_model=SupplierResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_supplier(
    supplier_id: str,
    use_case: GetSupplierUseCase = Depends(get_supplier_use_case),
) -> SupplierResponse:
    supplier = await use_case.execute(supplier_id)
    return use_case.to_response(supplier)


@router.get(
    "/{supplier_id}/quotas",
    response_model=SupplierQuotasResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_supplier_quotas(
    supplier_id: str,
    use_case: GetSupplierQuotasUseCase = Depends(get_supplier_quotas_use_case),
) -> SupplierQuotasResponse:
    """Per-period delivery targets with shortfall carried forward."""
    result = await use_case.execute(SupplierQuotasRequest(supplier_id=supplier_id))
    return use_case.to_response(result)


@router.post(
    "/{supplier_id}/deliveries",
    response_model=DeliveryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def schedule_delivery(
    supplier_id: str,
    request: ScheduleDeliveryRequest,
    use_case: ScheduleDeliveryUseCase = Depends(get_schedule_delivery_use_case),
) -> DeliveryResponse:
    """Reserve a delivery slot."""
    request.supplier_id = supplier_id
    delivery = await use_case.execute(request)
    return use_case.to_response(delivery)


@router.post(
    "/{supplier_id}/fulfill",
    response_model=FulfillDeliveryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def fulfill_delivery(
    supplier_id: str,
    request: FulfillDeliveryRequest,
    use_case: FulfillDeliveryUseCase = Depends(get_fulfill_delivery_use_case),
) -> FulfillDeliveryResponse:
    """Replace reserved slots with invoiced deliveries."""
    request.supplier_id = supplier_id
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post(
    "/{supplier_id}/cancel",
    response_model=CancelDeliveriesResponse,
    responses={404: {"model": ErrorResponse}},
)
async def cancel_deliveries(
    supplier_id: str,
    request: CancelDeliveriesRequest,
    use_case: CancelDeliveriesUseCase = Depends(get_cancel_deliveries_use_case),
) -> CancelDeliveriesResponse:
    request.supplier_id = supplier_id
    removed = await use_case.execute(request)
    return use_case.to_response(supplier_id, removed)


@router.post(
    "/{supplier_id}/invoices/{invoice_number}/reopen",
    response_model=ReopenInvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reopen_invoice(
    supplier_id: str,
    invoice_number: str,
    use_case: ReopenInvoiceUseCase = Depends(get_reopen_invoice_use_case),
) -> ReopenInvoiceResponse:
    """Undo a fulfillment back to one reserved slot."""
    result = await use_case.execute(
        ReopenInvoiceRequest(supplier_id=supplier_id, invoice_number=invoice_number)
    )
    return use_case.to_response(result)
