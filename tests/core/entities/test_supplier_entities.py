"""Tests for supplier and contract item entities."""

import pydantic
import pytest

from src.core.entities import ContractItem, Supplier, UnitDescriptor
from src.core.exceptions import ValidationError


class TestUnitDescriptor:
    """Tests for unit descriptor parsing and conversions."""

    def test_parse_type_and_factor(self):
        unit = UnitDescriptor.parse("caixa-12")
        assert unit.unit_type == "caixa"
        assert unit.factor == 12.0

    def test_parse_missing_factor_defaults_to_one(self):
        unit = UnitDescriptor.parse("kg")
        assert unit.unit_type == "kg"
        assert unit.factor == 1.0

    def test_parse_unreadable_factor_defaults_to_one(self):
        assert UnitDescriptor.parse("saco-abc").factor == 1.0

    def test_parse_decimal_comma(self):
        assert UnitDescriptor.parse("pacote-0,5").factor == 0.5

    def test_parse_empty_uses_default(self):
        unit = UnitDescriptor.parse(None)
        assert unit.unit_type == "kg"
        assert unit.factor == 1.0

    def test_parse_is_case_insensitive(self):
        assert UnitDescriptor.parse(" SACO-5 ").unit_type == "saco"

    def test_negative_factor_rejected(self):
        with pytest.raises(ValidationError):
            UnitDescriptor.parse("saco--5")

    @pytest.mark.parametrize(
        "raw,label",
        [
            ("kg-1", "Kg"),
            ("un-1", "Kg"),
            ("saco-5", "Kg"),
            ("balde-10", "Kg"),
            ("litro-1", "L"),
            ("caixa-12", "L"),
            ("dz-1", "Dz"),
            ("maco-1", "Un"),
        ],
    )
    def test_measure_label(self, raw, label):
        assert UnitDescriptor.parse(raw).measure_label == label

    def test_dozen_has_no_weight_factor(self):
        unit = UnitDescriptor.parse("dz-1")
        assert unit.is_dozen
        assert unit.weight_factor == 0.0

    def test_weight_factor_is_factor(self):
        assert UnitDescriptor.parse("saco-5").weight_factor == 5.0

    def test_measure_quantity_for_packages(self):
        assert UnitDescriptor.parse("saco-5").measure_quantity(10) == 50
        assert UnitDescriptor.parse("caixa-12").measure_quantity(2) == 24

    def test_measure_quantity_plain_units_unchanged(self):
        assert UnitDescriptor.parse("kg-1").measure_quantity(10) == 10
        assert UnitDescriptor.parse("dz-1").measure_quantity(10) == 10

    def test_price_per_measure_divides_package_price(self):
        assert UnitDescriptor.parse("saco-5").price_per_measure(25.0) == 5.0

    def test_price_per_measure_dozen_is_raw_price(self):
        assert UnitDescriptor.parse("dz-1").price_per_measure(7.2) == 7.2

    def test_price_per_measure_zero_factor_is_raw_price(self):
        assert UnitDescriptor.parse("saco-0").price_per_measure(25.0) == 25.0


class TestContractItem:
    """Tests for ContractItem entity."""

    def test_defaults(self):
        item = ContractItem(name="Arroz")
        assert item.total_quantity == 0.0
        assert item.unit == "kg-1"
        assert item.unit_price == 0.0
        assert item.position == 0

    def test_total_value(self):
        item = ContractItem(name="Arroz", total_quantity=100, unit_price=6.5)
        assert item.total_value == 650.0

    def test_unit_descriptor(self):
        item = ContractItem(name="Leite", unit="caixa-12")
        assert item.unit_descriptor.factor == 12.0

    def test_negative_quantity_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ContractItem(name="Arroz", total_quantity=-1)

    def test_negative_unit_factor_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ContractItem(name="Arroz", unit="kg--1")


class TestSupplier:
    """Tests for Supplier entity."""

    def test_contract_item_lookup_is_exact(self, make_supplier):
        supplier = make_supplier("1", "Alfa", items=[("Arroz", 10, "kg-1", 1.0)])
        assert supplier.contract_item("Arroz") is not None
        assert supplier.contract_item("ARROZ") is None

    def test_deliveries_for(self, make_supplier, make_delivery):
        from datetime import date

        rice = make_delivery("1", date(2026, 1, 5), "Arroz", 10)
        beans = make_delivery("1", date(2026, 1, 6), "Feijao", 5)
        supplier = make_supplier("1", "Alfa", deliveries=[rice, beans])
        assert supplier.deliveries_for("Arroz") == [rice]

    def test_contracted_and_delivered_value(self, make_supplier, make_delivery):
        from datetime import date

        supplier = make_supplier(
            "1",
            "Alfa",
            items=[("Arroz", 10, "kg-1", 2.0), ("Feijao", 5, "kg-1", 4.0)],
            deliveries=[make_delivery("1", date(2026, 1, 5), "Arroz", 3, value=6.0)],
        )
        assert supplier.contracted_value == 40.0
        assert supplier.delivered_value == 6.0
