"""Tests for RegisterLotUseCase."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import RegisterLotRequest
from src.application.services import LotLockRegistry
from src.application.use_cases.register_lot import RegisterLotUseCase
from src.config import reset_settings
from src.core.entities import LedgerSnapshot
from src.core.exceptions import (
    ContractBalanceExceededError,
    DeliveryNotFoundError,
    DuplicateBarcodeError,
    OverAllocationError,
    ValidationError,
)
from src.core.services import BalanceAggregator


@pytest.fixture
def delivery(make_delivery, make_lot):
    return make_delivery(
        "1", date(2026, 1, 10), "Arroz", 30, lots=[make_lot("L-1", 20, lot_id=1)], delivery_id=7
    )


@pytest.fixture
def mock_ledger_store(delivery):
    store = AsyncMock()
    store.get_delivery.return_value = delivery
    store.get_lot_by_barcode.return_value = None
    store.add_lot.side_effect = lambda lot: lot.model_copy(update={"id": 99})
    return store


@pytest.fixture
def use_case(mock_ledger_store):
    return RegisterLotUseCase(
        ledger_store=mock_ledger_store, locks=LotLockRegistry(), tolerance=0.0
    )


class TestRegisterLotUseCase:
    async def test_registers_lot(self, use_case, mock_ledger_store):
        result = await use_case.execute(
            RegisterLotRequest(
                delivery_id=7,
                lot_code="L-2",
                initial_quantity=10,
                expiration_date=date(2026, 6, 30),
            )
        )

        lot = mock_ledger_store.add_lot.call_args[0][0]
        assert lot.delivery_id == 7
        assert lot.barcode == "L-2"
        assert lot.remaining_quantity == 10
        assert result.lot.id == 99
        assert result.allocated_after == 30

    async def test_explicit_barcode(self, use_case, mock_ledger_store):
        await use_case.execute(
            RegisterLotRequest(delivery_id=7, lot_code="L-2", barcode=" 7891 ", initial_quantity=1)
        )
        assert mock_ledger_store.add_lot.call_args[0][0].barcode == "7891"

    async def test_over_allocation_leaves_state_unchanged(self, use_case, mock_ledger_store):
        with pytest.raises(OverAllocationError) as exc_info:
            await use_case.execute(
                RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=15)
            )
        assert exc_info.value.details["allocated"] == 20
        assert exc_info.value.details["delivered"] == 30
        mock_ledger_store.add_lot.assert_not_awaited()

    async def test_tolerance_absorbs_rounding(self, mock_ledger_store):
        use_case = RegisterLotUseCase(
            ledger_store=mock_ledger_store, locks=LotLockRegistry(), tolerance=0.01
        )
        await use_case.execute(
            RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=10.005)
        )
        mock_ledger_store.add_lot.assert_awaited_once()

    async def test_default_tolerance_from_settings(self, mock_ledger_store):
        use_case = RegisterLotUseCase(ledger_store=mock_ledger_store)
        assert use_case.tolerance == 0.001

    async def test_duplicate_barcode(self, use_case, mock_ledger_store, make_lot):
        mock_ledger_store.get_lot_by_barcode.return_value = make_lot("L-2", 5, lot_id=3)
        with pytest.raises(DuplicateBarcodeError):
            await use_case.execute(RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=5))
        mock_ledger_store.add_lot.assert_not_awaited()

    async def test_pending_delivery_rejected(self, use_case, mock_ledger_store, make_delivery):
        mock_ledger_store.get_delivery.return_value = make_delivery(
            "1", date(2026, 1, 10), None, 0, invoice_number=None, delivery_id=7
        )
        with pytest.raises(ValidationError):
            await use_case.execute(RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=1))

    async def test_missing_delivery(self, use_case, mock_ledger_store):
        mock_ledger_store.get_delivery.return_value = None
        with pytest.raises(DeliveryNotFoundError):
            await use_case.execute(RegisterLotRequest(delivery_id=8, lot_code="L-2", initial_quantity=1))

    @pytest.mark.parametrize("quantity", [0, -3])
    async def test_non_positive_quantity(self, use_case, quantity):
        with pytest.raises(ValidationError):
            await use_case.execute(
                RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=quantity)
            )

    async def test_concurrent_registrations_are_serialized(self, mock_ledger_store, delivery):
        """Two lots of 10 on 10 remaining capacity: only one may pass."""

        async def add_lot(lot):
            await asyncio.sleep(0)
            stored = lot.model_copy(update={"id": 100 + len(delivery.lots)})
            delivery.lots.append(stored)
            return stored

        mock_ledger_store.add_lot.side_effect = add_lot
        use_case = RegisterLotUseCase(
            ledger_store=mock_ledger_store, locks=LotLockRegistry(), tolerance=0.0
        )

        results = await asyncio.gather(
            use_case.execute(RegisterLotRequest(delivery_id=7, lot_code="A", initial_quantity=10)),
            use_case.execute(RegisterLotRequest(delivery_id=7, lot_code="B", initial_quantity=10)),
            return_exceptions=True,
        )

        assert sum(isinstance(r, OverAllocationError) for r in results) == 1
        assert delivery.allocated_quantity == 30


class TestContractBalanceGuard:
    @pytest.fixture
    def contracted(self, mock_ledger_store, make_supplier, delivery):
        """25 kg of rice contracted, 20 kg already in lots."""
        mock_ledger_store.snapshot.return_value = LedgerSnapshot(
            suppliers=[make_supplier("1", "Alfa", items=[("Arroz", 25, "kg-1", 6.0)], deliveries=[delivery])]
        )
        return mock_ledger_store

    def _use_case(self, store, enforce: bool) -> RegisterLotUseCase:
        return RegisterLotUseCase(
            ledger_store=store,
            locks=LotLockRegistry(),
            tolerance=0.001,
            aggregator=BalanceAggregator(),
            enforce_contract_balance=enforce,
        )

    async def test_lot_beyond_contract_rejected(self, contracted):
        with pytest.raises(ContractBalanceExceededError) as exc_info:
            await self._use_case(contracted, enforce=True).execute(
                RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=10)
            )
        assert exc_info.value.details["remaining"] == 5
        assert exc_info.value.details["requested"] == 10
        contracted.add_lot.assert_not_awaited()

    async def test_lot_within_tolerance_accepted(self, contracted):
        await self._use_case(contracted, enforce=True).execute(
            RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=5.0005)
        )
        contracted.add_lot.assert_awaited_once()

    async def test_off_by_default(self, contracted):
        use_case = RegisterLotUseCase(ledger_store=contracted, locks=LotLockRegistry())
        assert use_case.enforce_contract_balance is False

        await use_case.execute(RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=10))
        contracted.snapshot.assert_not_awaited()
        contracted.add_lot.assert_awaited_once()

    async def test_enabled_from_settings(self, contracted, monkeypatch):
        monkeypatch.setenv("LEDGER_ENFORCE_CONTRACT_BALANCE", "true")
        reset_settings()
        use_case = RegisterLotUseCase(ledger_store=contracted, locks=LotLockRegistry())

        with pytest.raises(ContractBalanceExceededError):
            await use_case.execute(RegisterLotRequest(delivery_id=7, lot_code="L-2", initial_quantity=10))

    async def test_contract_units_converted(self, mock_ledger_store, make_supplier, make_delivery):
        """Boxes of 12 L: 2 boxes contracted means 24 L may be received."""
        milk = make_delivery("1", date(2026, 1, 10), "Leite", 36, delivery_id=7)
        mock_ledger_store.get_delivery.return_value = milk

        def add_lot(lot):
            stored = lot.model_copy(update={"id": 200 + len(milk.lots)})
            milk.lots.append(stored)
            return stored

        mock_ledger_store.add_lot.side_effect = add_lot
        mock_ledger_store.snapshot.return_value = LedgerSnapshot(
            suppliers=[make_supplier("1", "Alfa", items=[("Leite", 2, "caixa-12", 40.0)], deliveries=[milk])]
        )
        use_case = self._use_case(mock_ledger_store, enforce=True)

        await use_case.execute(RegisterLotRequest(delivery_id=7, lot_code="M-1", initial_quantity=24))
        with pytest.raises(ContractBalanceExceededError):
            await use_case.execute(RegisterLotRequest(delivery_id=7, lot_code="M-2", initial_quantity=12))
