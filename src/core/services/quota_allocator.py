"""
Quota allocation service.

Splits a contracted total into per-period delivery targets (four monthly
periods by default) and rolls the unmet shortfall of a period that received
deliveries into the next one:

    adjusted_target    = base_target - deficit
    remaining_in_period = adjusted_target - delivered
    deficit            = remaining_in_period if delivered > 0 and remaining_in_period > 0 else 0

A period with nothing delivered carries nothing forward, so an untouched
contract keeps its even split.

The adjusted target is reported verbatim even when negative. Only the
displayed remaining is clamped at zero; the rollover uses the raw value.

Pure service -- no infrastructure imports.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from src.config import get_logger
from src.core.entities.delivery import Delivery
from src.core.entities.ledger import ContractQuota, PeriodQuota
from src.core.entities.supplier import ContractItem, Supplier
from src.core.exceptions import ValidationError

logger = get_logger(__name__)


@dataclass(frozen=True)
class QuotaPeriod:
    """A half-open date range [start, end)."""

    label: str
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end


def monthly_periods(start_year: int, start_month: int, count: int) -> list[QuotaPeriod]:
    """Consecutive calendar months starting at start_year/start_month."""
    if count < 1:
        raise ValidationError("periods", "at least one allocation period is required", count)
    periods = []
    year, month = start_year, start_month
    for _ in range(count):
        next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
        periods.append(
            QuotaPeriod(
                label=f"{year:04d}-{month:02d}",
                start=date(year, month, 1),
                end=date(next_year, next_month, 1),
            )
        )
        year, month = next_year, next_month
    return periods


class QuotaAllocator:
    """Turns contracted totals into time-boxed delivery obligations."""

    def __init__(self, periods: list[QuotaPeriod]) -> None:
        if not periods:
            raise ValidationError("periods", "at least one allocation period is required")
        self._periods = periods

    @classmethod
    def monthly(cls, start_year: int, start_month: int, count: int = 4) -> "QuotaAllocator":
        return cls(monthly_periods(start_year, start_month, count))

    @property
    def periods(self) -> list[QuotaPeriod]:
        return list(self._periods)

    def allocate(
        self,
        total: float,
        delivered: list[float] | None = None,
        price_per_measure: float = 0.0,
        delivered_values: list[float] | None = None,
    ) -> list[PeriodQuota]:
        """
        Compute per-period targets.

        Args:
            total: Contracted total, already in delivery measure.
            delivered: Quantity delivered in each period, chronological.
            price_per_measure: Price used for the monetary target.
            delivered_values: Invoiced value per period.

        Returns:
            One PeriodQuota per period, in chronological order.
        """
        if total < 0:
            raise ValidationError("total", "contracted total must be non-negative", total)

        count = len(self._periods)
        delivered = delivered or [0.0] * count
        delivered_values = delivered_values or [0.0] * count
        if len(delivered) != count or len(delivered_values) != count:
            raise ValidationError("delivered", f"expected {count} period values", len(delivered))

        base_target = total / count
        deficit = 0.0
        quotas = []

        for index, period in enumerate(self._periods):
            adjusted_target = base_target - deficit
            remaining_in_period = adjusted_target - delivered[index]

            quotas.append(
                PeriodQuota(
                    index=index,
                    label=period.label,
                    start=period.start,
                    end=period.end,
                    base_target=base_target,
                    carried_deficit=deficit,
                    adjusted_target=adjusted_target,
                    delivered=delivered[index],
                    remaining=max(0.0, remaining_in_period),
                    target_value=adjusted_target * price_per_measure,
                    delivered_value=delivered_values[index],
                )
            )

            rolls_over = delivered[index] > 0 and remaining_in_period > 0
            deficit = remaining_in_period if rolls_over else 0.0

        return quotas

    def bucket(self, deliveries: Iterable[Delivery]) -> tuple[list[float], list[float]]:
        """Sum delivered quantity and value per period; out-of-range dates are ignored."""
        quantities = [0.0] * len(self._periods)
        values = [0.0] * len(self._periods)
        for delivery in deliveries:
            if delivery.is_pending:
                continue
            for index, period in enumerate(self._periods):
                if period.contains(delivery.date):
                    quantities[index] += delivery.quantity
                    values[index] += delivery.value
                    break
        return quantities, values

    def allocate_item(self, supplier: Supplier, item: ContractItem) -> ContractQuota:
        """Quota schedule for one contract item of a supplier."""
        unit = item.unit_descriptor
        total = unit.measure_quantity(item.total_quantity)
        quantities, values = self.bucket(supplier.deliveries_for(item.name))

        periods = self.allocate(
            total,
            quantities,
            price_per_measure=unit.price_per_measure(item.unit_price),
            delivered_values=values,
        )

        logger.debug(
            "quota_allocated",
            supplier_id=supplier.id,
            item=item.name,
            total=total,
            periods=len(periods),
        )

        return ContractQuota(
            supplier_id=supplier.id,
            item_name=item.name,
            unit=unit.measure_label,
            total=total,
            periods=periods,
        )

    def allocate_supplier(self, supplier: Supplier) -> list[ContractQuota]:
        """Quota schedules for every contract item, in presentation order."""
        items = sorted(supplier.contract_items, key=lambda i: i.position)
        return [self.allocate_item(supplier, item) for item in items]
