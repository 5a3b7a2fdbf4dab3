"""orderkit: declarative, composable ordering rules.

Two layers sharing one model:
  order: ``Order`` builder (immutable step list, comparator and DSU sort)
  comparators: standalone comparator combinators (by, order, when, ...)
"""

from . import comparators
from .errors import OrderingError, UnknownDirectionError
from .order import Order
from .types import Comparator, Direction, KeyFunc, Predicate

__all__ = [
    "Order",
    "comparators",
    "Comparator",
    "Direction",
    "KeyFunc",
    "Predicate",
    "OrderingError",
    "UnknownDirectionError",
]
