"""Multi-column sorting for tabular view models.

`MultiColumnSorter` accepts a list of row objects and sorts them according
to a priority list of `SortKey` entries, highest precedence first. The keys
are compiled into a single `Order` so every key function runs once per row
(DSU) instead of once per comparison, and sorting stays stable.

`SortPriority` tracks the (column, ascending) list a table header builds up
from clicks and turns it into an `Order` given a column -> key mapping.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from orderkit.types import Comparator
from orderkit.order import Order

__all__ = ["SortKey", "MultiColumnSorter", "SortPriority", "order_from_keys"]

T = TypeVar("T")
KeyFunc = Callable[[T], object]


@dataclass(frozen=True)
class SortKey:
    key_func: KeyFunc
    ascending: bool = True
    compare: Optional[Comparator] = None

    @property
    def direction(self) -> str:
        return "asc" if self.ascending else "desc"


def order_from_keys(keys: Sequence[SortKey]) -> Order:
    order: Order = Order()
    for sk in keys:
        order = order.by(sk.key_func, direction=sk.direction, compare=sk.compare)
    return order


class MultiColumnSorter(Generic[T]):
    """Utility to apply multi-key sorting in a stable manner.

    Usage:
        sorter = MultiColumnSorter(rows)
        rows_sorted = sorter.sort([
            SortKey(lambda r: r.points, ascending=False),
            SortKey(lambda r: r.team_name, ascending=True),
        ])
    """

    def __init__(self, rows: Iterable[T]):
        self._rows: List[T] = list(rows)

    def sort(self, keys: Sequence[SortKey]) -> List[T]:
        return order_from_keys(keys).sort(self._rows)

    @staticmethod
    def single(rows: Iterable[T], key: KeyFunc, ascending: bool = True) -> List[T]:
        return Order.by(key, direction="asc" if ascending else "desc").sort(list(rows))


class SortPriority:
    """Ordered list of (column_index, ascending) driven by header clicks.

    A plain click makes the column the only sort key, or flips its direction
    if it already is the primary key. An additive (shift) click appends the
    column ascending, or flips it in place if it is already part of the list.
    """

    def __init__(self, priority: Iterable[Tuple[int, bool]] = ()):
        self._priority: List[Tuple[int, bool]] = list(priority)

    def __iter__(self):
        return iter(self._priority)

    def __len__(self) -> int:
        return len(self._priority)

    def as_list(self) -> List[Tuple[int, bool]]:
        return list(self._priority)

    def clear(self) -> None:
        self._priority = []

    def toggle(self, column: int, *, additive: bool = False) -> None:
        existing = next((i for i, (c, _) in enumerate(self._priority) if c == column), None)
        if not additive:
            if existing == 0:
                col, asc = self._priority[0]
                self._priority[0] = (col, not asc)
            else:
                self._priority = [(column, True)]
        elif existing is None:
            self._priority.append((column, True))
        else:
            col, asc = self._priority[existing]
            self._priority[existing] = (col, not asc)

    def to_order(self, column_keys: Mapping[int, KeyFunc]) -> Order:
        """Compile the priority list; columns without a key function are skipped."""
        keys = [
            SortKey(column_keys[col], asc) for col, asc in self._priority if col in column_keys
        ]
        return order_from_keys(keys)
