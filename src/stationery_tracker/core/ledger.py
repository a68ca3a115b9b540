"""
Stock ledger: one StockItem per catalog item.

The ledger is a plain mutator. It never raises and never refuses a change
that would drive a quantity negative; gating is done beforehand by the
reconciliation engine through sufficiency_check().
"""

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Mapping


@dataclass
class StockItem:
    """Current quantity and most recent activity for one item."""

    quantity: int = 0
    last_in_date: str = ""
    last_out_date: str = ""
    last_update_quantity: int = 0  # >0 addition, <0 deduction, 0 nothing yet

    def to_dict(self) -> dict:
        return {
            "quantity": self.quantity,
            "lastInDate": self.last_in_date,
            "lastOutDate": self.last_out_date,
            "lastUpdateQuantity": self.last_update_quantity,
        }


@dataclass(frozen=True)
class Deficiency:
    """An item whose requested amount exceeds what is on hand."""

    item: str
    requested: int
    available: int

    @property
    def shortfall(self) -> int:
        return self.requested - self.available


class StockLedger:
    """
    Mapping of catalog item to StockItem.

    Items are fixed at construction; report activity only changes the
    numeric and date fields of existing entries. Operations on names outside
    the catalog are ignored.
    """

    def __init__(
        self,
        catalog: Iterable[str],
        items: Mapping[str, StockItem] | None = None,
    ):
        self._items: dict[str, StockItem] = {name: StockItem() for name in catalog}
        if items:
            self.replace(items)

    @property
    def catalog(self) -> list[str]:
        return list(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StockLedger):
            return NotImplemented
        return self._items == other._items

    def get(self, item: str) -> StockItem | None:
        """Return a copy of the entry, or None for an unknown item."""
        entry = self._items.get(item)
        return replace(entry) if entry is not None else None

    def quantity(self, item: str) -> int:
        entry = self._items.get(item)
        return entry.quantity if entry is not None else 0

    def apply_delta(self, item: str, delta: int, today: str) -> None:
        """Add delta to an item and stamp the matching in/out date."""
        entry = self._items.get(item)
        if entry is None or delta == 0:
            return

        entry.quantity += delta
        if delta > 0:
            entry.last_in_date = today
        else:
            entry.last_out_date = today
        entry.last_update_quantity = delta

    def set_absolute(self, item: str, new_quantity: int, today: str) -> None:
        """Bulk stock edit: move an item to new_quantity as a single delta."""
        entry = self._items.get(item)
        if entry is None:
            return
        self.apply_delta(item, new_quantity - entry.quantity, today)

    def clear_all(self) -> None:
        for name in self._items:
            self._items[name] = StockItem()

    def sufficiency_check(self, demands: Mapping[str, int]) -> list[Deficiency]:
        """
        Compare demands against current quantities.

        Returns every item where demand exceeds availability, in demand order.
        Unknown items have nothing available.
        """
        deficiencies = []
        for item, requested in demands.items():
            available = self.quantity(item)
            if requested > available:
                deficiencies.append(
                    Deficiency(item=item, requested=requested, available=available)
                )
        return deficiencies

    def replace(self, items: Mapping[str, StockItem]) -> None:
        """Overwrite catalog entries from items; names outside the catalog are skipped."""
        for name, entry in items.items():
            if name in self._items:
                self._items[name] = replace(entry)

    def snapshot(self) -> dict[str, StockItem]:
        return {name: replace(entry) for name, entry in self._items.items()}

    def to_dict(self) -> dict[str, dict]:
        return {name: entry.to_dict() for name, entry in self._items.items()}
