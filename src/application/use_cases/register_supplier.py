"""Register Supplier Use Case — supplier plus its contract line items."""

from dataclasses import dataclass

from src.application.dto.mappers import supplier_to_response
from src.application.dto.requests import RegisterSupplierRequest
from src.application.dto.responses import SupplierListResponse, SupplierResponse
from src.config import get_logger
from src.core.entities.supplier import ContractItem, Supplier
from src.core.exceptions import SupplierNotFoundError, ValidationError
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.services.name_normalizer import normalize_name

logger = get_logger(__name__)


@dataclass
class RegisterSupplierResult:
    """Result of registering a supplier."""

    supplier: Supplier


class RegisterSupplierUseCase:
    """Create a supplier and its contract."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: RegisterSupplierRequest) -> RegisterSupplierResult:
        supplier_id = request.id.strip()
        if not supplier_id:
            raise ValidationError("id", "supplier tax id is required")

        store = await self._get_store()
        if await store.get_supplier(supplier_id) is not None:
            raise ValidationError("id", "supplier already registered", supplier_id)

        # Two contract lines normalizing to the same key would be one item
        seen: set[str] = set()
        items = []
        for position, line in enumerate(request.contract_items):
            key = normalize_name(line.name)
            if not key:
                raise ValidationError("contract_items", "item name has no letters or digits", line.name)
            if key in seen:
                raise ValidationError("contract_items", "duplicate contract item", line.name)
            seen.add(key)
            try:
                items.append(
                    ContractItem(
                        name=line.name.strip(),
                        total_quantity=line.total_quantity,
                        unit=line.unit,
                        unit_price=line.unit_price,
                        position=position,
                        category=line.category,
                        siafem_code=line.siafem_code,
                        compras_code=line.compras_code,
                    )
                )
            except ValueError as e:
                raise ValidationError("contract_items", str(e), line.unit) from e

        supplier = Supplier(
            id=supplier_id,
            name=request.name.strip(),
            allowed_weeks=sorted(set(request.allowed_weeks)),
            contract_items=items,
        )
        supplier = await store.create_supplier(supplier)

        logger.info(
            "supplier_registered",
            supplier_id=supplier.id,
            items=len(items),
            contracted_value=supplier.contracted_value,
        )
        return RegisterSupplierResult(supplier=supplier)

    def to_response(self, result: RegisterSupplierResult) -> SupplierResponse:
        return supplier_to_response(result.supplier)


class GetSupplierUseCase:
    """Read one supplier with deliveries and lots."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, supplier_id: str) -> Supplier:
        store = await self._get_store()
        supplier = await store.get_supplier(supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(supplier_id)
        return supplier

    async def list_all(self) -> list[Supplier]:
        store = await self._get_store()
        return await store.list_suppliers()

    def to_response(self, supplier: Supplier) -> SupplierResponse:
        return supplier_to_response(supplier)

    def list_to_response(self, suppliers: list[Supplier]) -> SupplierListResponse:
        return SupplierListResponse(
            suppliers=[supplier_to_response(s) for s in suppliers],
            total=len(suppliers),
        )
