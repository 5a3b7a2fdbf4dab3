"""Table sorting helpers built on :class:`orderkit.order.Order`.

``multi_column_sort`` has no GUI dependency; ``sort_proxy`` needs PyQt6
(``pip install orderkit[qt]``) and is therefore not imported here.
"""

from .multi_column_sort import MultiColumnSorter, SortKey, SortPriority  # noqa: F401

__all__ = ["MultiColumnSorter", "SortKey", "SortPriority"]
