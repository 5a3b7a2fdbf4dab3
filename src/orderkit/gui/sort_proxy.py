"""Qt proxy model sorting table rows with an `Order`.

Each source row carries its underlying row object under `ROW_ROLE`; the
proxy compares those objects with the active order instead of comparing
cell display text, so multi-column priority, custom comparators and
guarded steps behave exactly as in `Order.compare`. Rows without a row
object fall back to Qt's default cell comparison.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple

from PyQt6.QtCore import QModelIndex, QObject, QSortFilterProxyModel, Qt
from PyQt6.QtGui import QStandardItem, QStandardItemModel

from orderkit.order import Order

from .multi_column_sort import SortPriority

__all__ = ["ROW_ROLE", "OrderSortProxyModel", "build_item_model"]

ROW_ROLE = Qt.ItemDataRole.UserRole

Column = Tuple[str, Callable[[Any], Any]]


def build_item_model(rows: Iterable[Any], columns: Sequence[Column]) -> QStandardItemModel:
    """Populate a `QStandardItemModel` with one display cell per (header, getter) column."""
    model = QStandardItemModel(0, len(columns))
    model.setHorizontalHeaderLabels([header for header, _ in columns])
    for row in rows:
        items = []
        for _, getter in columns:
            value = getter(row)
            item = QStandardItem("" if value is None else str(value))
            item.setData(row, ROW_ROLE)
            item.setEditable(False)
            items.append(item)
        model.appendRow(items)
    return model


class OrderSortProxyModel(QSortFilterProxyModel):
    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._order: Order = Order()
        self._compare = self._order.compare

    def order(self) -> Order:
        return self._order

    def set_order(self, order: Order) -> None:
        self._order = order
        self._compare = order.compare
        self.invalidate()
        # any valid column activates sorting; lessThan ignores it
        self.sort(0, Qt.SortOrder.AscendingOrder)

    def apply_priority(self, priority: SortPriority, column_keys: Mapping[int, Callable[[Any], Any]]):
        """Sort by a header-driven priority list (see `SortPriority.toggle`)."""
        self.set_order(priority.to_order(column_keys))

    def row_objects(self) -> list:
        return [self.index(r, 0).data(ROW_ROLE) for r in range(self.rowCount())]

    def lessThan(self, left: QModelIndex, right: QModelIndex) -> bool:  # noqa: N802 - Qt override
        a = left.data(ROW_ROLE)
        b = right.data(ROW_ROLE)
        if a is None or b is None:
            return super().lessThan(left, right)
        return self._compare(a, b) < 0
