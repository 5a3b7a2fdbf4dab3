"""Standalone comparator combinators.

Plain two-argument comparators ``(a, b) -> int`` and functions that build or
wrap them. They follow the same semantics as :class:`orderkit.order.Order`
steps but compose through ordinary function nesting instead of a builder:

    sort_users = order(
        by(lambda u: u.last_name),
        by(lambda u: u.age, compare=nulls_last(number)),
        when(lambda u: u.is_active, by(lambda u: u.score, direction="desc")),
    )
    users.sort(key=functools.cmp_to_key(sort_users))
"""

from __future__ import annotations

import locale
import math
import numbers
from datetime import date as _date, datetime, time
from typing import Any, Callable, Optional

from .types import Comparator, Direction, Predicate, direction_sign

__all__ = [
    "A_BEFORE_B",
    "A_AFTER_B",
    "EQUAL",
    "compare",
    "string",
    "locale_string",
    "number",
    "boolean",
    "date",
    "reverse",
    "nulls_first",
    "nulls_last",
    "nans_first",
    "nans_last",
    "by",
    "order",
    "map",
    "when",
]

A_BEFORE_B = -1
A_AFTER_B = 1
EQUAL = 0


def _is_nan(value: Any) -> bool:
    return isinstance(value, numbers.Number) and value != value


def reverse(compare_fn: Comparator) -> Comparator:
    """Swap the arguments of ``compare_fn`` so higher values come first."""
    return lambda a, b: compare_fn(b, a)


def nulls_first(compare_fn: Comparator) -> Comparator:
    """Sort ``None`` before every other value; other pairs go to ``compare_fn``."""

    def _cmp(a: Any, b: Any) -> int:
        if a is None and b is None:
            return EQUAL
        if a is None:
            return A_BEFORE_B
        if b is None:
            return A_AFTER_B
        return compare_fn(a, b)

    return _cmp


def nulls_last(compare_fn: Comparator) -> Comparator:
    """Sort ``None`` after every other value; other pairs go to ``compare_fn``."""

    def _cmp(a: Any, b: Any) -> int:
        if a is None and b is None:
            return EQUAL
        if a is None:
            return A_AFTER_B
        if b is None:
            return A_BEFORE_B
        return compare_fn(a, b)

    return _cmp


def nans_first(compare_fn: Comparator) -> Comparator:
    """Sort numeric NaN before every other value."""

    def _cmp(a: Any, b: Any) -> int:
        a_nan = _is_nan(a)
        b_nan = _is_nan(b)
        if a_nan and b_nan:
            return EQUAL
        if a_nan:
            return A_BEFORE_B
        if b_nan:
            return A_AFTER_B
        return compare_fn(a, b)

    return _cmp


def nans_last(compare_fn: Comparator) -> Comparator:
    """Sort numeric NaN after every other value."""

    def _cmp(a: Any, b: Any) -> int:
        a_nan = _is_nan(a)
        b_nan = _is_nan(b)
        if a_nan and b_nan:
            return EQUAL
        if a_nan:
            return A_AFTER_B
        if b_nan:
            return A_BEFORE_B
        return compare_fn(a, b)

    return _cmp


def compare(a: Any, b: Any) -> int:
    """Natural ordering through the ``<`` and ``>`` operators."""
    if a < b:
        return A_BEFORE_B
    if a > b:
        return A_AFTER_B
    return EQUAL


_natural = compare
string = compare


def locale_string(a: str, b: str) -> int:
    """Locale aware string comparison using the current ``LC_COLLATE``."""
    return locale.strcoll(a, b)


def number(a: float, b: float) -> int:
    """Numeric comparator placing NaN before every other number."""
    a_nan = a != a
    b_nan = b != b
    if a_nan and b_nan:
        return EQUAL
    if a_nan:
        return A_BEFORE_B
    if b_nan:
        return A_AFTER_B
    return compare(a, b)


def boolean(a: bool, b: bool) -> int:
    """False before True."""
    return int(bool(a)) - int(bool(b))


def _timestamp(value: Any) -> float:
    if value is None:
        return math.nan
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, _date):
        return datetime.combine(value, time()).timestamp()
    return float(value)


def date(a: Any, b: Any) -> int:
    """Compare datetimes, dates or epoch seconds by timestamp.

    Missing values (``None``) and NaN timestamps are treated as one class of
    invalid dates sorting before every valid one.
    """
    return number(_timestamp(a), _timestamp(b))


def by(
    key: Callable[[Any], Any],
    *,
    direction: Direction | None = None,
    compare: Optional[Comparator] = None,
    predicate: Optional[Predicate] = None,
) -> Comparator:
    """Comparator projecting both operands through ``key``.

    ``compare`` defaults to natural ordering (also when passed ``None``);
    descending direction wraps it with :func:`reverse`. With a ``predicate``
    the comparator returns 0 unless both operands satisfy it.
    """
    base = compare if compare is not None else _natural
    compare_fn = base if direction_sign(direction) > 0 else reverse(base)
    if predicate is None:
        return lambda a, b: compare_fn(key(a), key(b))

    def _cmp(a: Any, b: Any) -> int:
        if not predicate(a) or not predicate(b):
            return EQUAL
        return compare_fn(key(a), key(b))

    return _cmp


def order(*comparators: Comparator) -> Comparator:
    """Chain comparators; the first non-zero result wins."""

    def _cmp(a: Any, b: Any) -> int:
        for comparator in comparators:
            r = comparator(a, b)
            if r != 0:
                return r
        return EQUAL

    return _cmp


def map(mapper: Callable[[Any], Any], compare_fn: Optional[Comparator] = None) -> Comparator:  # noqa: A001
    """Compare ``mapper(a)`` with ``mapper(b)``, naturally unless ``compare_fn`` is given."""
    base = compare_fn if compare_fn is not None else _natural
    return lambda a, b: base(mapper(a), mapper(b))


def when(predicate: Predicate, compare_fn: Comparator) -> Comparator:
    """Run ``compare_fn`` only when both values satisfy ``predicate``, else tie."""

    def _cmp(a: Any, b: Any) -> int:
        a_match = predicate(a)
        b_match = predicate(b)
        if a_match and b_match:
            return compare_fn(a, b)
        return EQUAL

    return _cmp
