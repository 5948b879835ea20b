"""
Balance aggregation service.

Read-only projection over a ledger snapshot: per item, what was contracted
across every supplier, what was received into lots, what is still owed and
what is on the shelf. Nothing is cached, so the result can never drift from
the snapshot it was computed from.

Contract items whose names match under the active policy form one group, so
contracted and received quantities are summed under the same rule. Each
delivery and entry movement is credited to exactly one group: the one holding
its exact key, else the first group it matches.
"""

from dataclasses import dataclass, field

from src.config import get_logger
from src.core.entities.ledger import ItemBalance, LedgerSnapshot
from src.core.entities.movement import MovementType
from src.core.entities.supplier import UnitDescriptor
from src.core.services.name_normalizer import NameMatcher

logger = get_logger(__name__)


@dataclass
class _ItemGroup:
    """Contract items that refer to the same product."""

    key: str
    name: str
    unit: UnitDescriptor
    keys: list[str] = field(default_factory=list)
    contracted: float = 0.0
    supplier_ids: set[str] = field(default_factory=set)
    received_measure: float = 0.0
    in_stock: float = 0.0
    logged_entries: float = 0.0

    def absorb(self, other: "_ItemGroup") -> None:
        self.keys.extend(k for k in other.keys if k not in self.keys)
        self.contracted += other.contracted
        self.supplier_ids |= other.supplier_ids


class BalanceAggregator:
    """Contracted vs received balances per item group."""

    def __init__(self, matcher: NameMatcher | None = None) -> None:
        self._matcher = matcher or NameMatcher()

    def _matches_group(self, group: _ItemGroup, key: str) -> bool:
        return any(self._matcher.matches_keys(k, key) for k in group.keys)

    def _group_contract_items(self, snapshot: LedgerSnapshot) -> list[_ItemGroup]:
        groups: list[_ItemGroup] = []
        for supplier in snapshot.suppliers:
            for item in sorted(supplier.contract_items, key=lambda i: i.position):
                key = self._matcher.key(item.name)
                if not key:
                    continue

                matching = [g for g in groups if self._matches_group(g, key)]
                if matching:
                    group = matching[0]
                    # a new name can bridge two groups that did not match before
                    for other in matching[1:]:
                        group.absorb(other)
                        groups.remove(other)
                else:
                    group = _ItemGroup(key=key, name=item.name, unit=item.unit_descriptor)
                    groups.append(group)

                if key not in group.keys:
                    group.keys.append(key)
                group.contracted += item.total_quantity
                group.supplier_ids.add(supplier.id)
        return groups

    def _owner(self, groups: list[_ItemGroup], name: str | None) -> _ItemGroup | None:
        key = self._matcher.key(name)
        if not key:
            return None
        for group in groups:
            if key in group.keys:
                return group
        for group in groups:
            if self._matches_group(group, key):
                return group
        return None

    def _credit(self, groups: list[_ItemGroup], snapshot: LedgerSnapshot) -> None:
        for supplier in snapshot.suppliers:
            for delivery in supplier.deliveries:
                if delivery.is_pending:
                    continue
                group = self._owner(groups, delivery.item_name)
                if group is not None:
                    group.received_measure += delivery.allocated_quantity
                    group.in_stock += delivery.stock_on_hand

        for movement in snapshot.movements:
            if movement.movement_type != MovementType.ENTRY:
                continue
            group = self._owner(groups, movement.item_name)
            if group is not None:
                group.logged_entries += movement.quantity

    def _balance(self, group: _ItemGroup) -> ItemBalance:
        factor = group.unit.weight_factor
        comparable = factor > 0
        if comparable:
            received = group.received_measure / factor
            remaining = max(0.0, group.contracted - received)
        else:
            received = 0.0
            remaining = group.contracted

        return ItemBalance(
            normalized_name=group.key,
            name=group.name,
            unit=group.unit.measure_label,
            contracted=group.contracted,
            received=received,
            remaining=remaining,
            in_stock=group.in_stock,
            logged_entries=group.logged_entries,
            supplier_count=len(group.supplier_ids),
            comparable=comparable,
        )

    def balance_for(self, snapshot: LedgerSnapshot, item_name: str | None) -> ItemBalance | None:
        """Balance of the group a delivery of item_name is credited to."""
        groups = self._group_contract_items(snapshot)
        group = self._owner(groups, item_name)
        if group is None:
            return None
        self._credit(groups, snapshot)
        return self._balance(group)

    def get_balances(
        self,
        snapshot: LedgerSnapshot,
        item_filter: str | None = None,
    ) -> list[ItemBalance]:
        """
        Compute balances for every contracted item.

        Args:
            snapshot: Suppliers and movement ledger as of one read.
            item_filter: Optional item name; matched with the same policy.

        Returns:
            Balances sorted by display name; items with nothing contracted
            are left out.
        """
        groups = self._group_contract_items(snapshot)
        self._credit(groups, snapshot)

        if item_filter:
            filter_key = self._matcher.key(item_filter)
            groups = [g for g in groups if self._matches_group(g, filter_key)]

        balances = [self._balance(group) for group in groups if group.contracted > 0]
        balances.sort(key=lambda b: (b.name.lower(), b.normalized_name))

        logger.debug("balances_computed", items=len(balances), item_filter=item_filter)
        return balances
