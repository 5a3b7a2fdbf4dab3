"""Immutable multi-step ordering rules.

An :class:`Order` is an ordered tuple of steps. Each step extracts a key from
an element and compares keys either with the natural ``<`` / ``>`` operators
or with a caller supplied comparator; an optional predicate gates the step so
it only runs when both compared elements satisfy it.

Two ways of applying an order:
 - ``order.compare`` / ``order.key`` for ``sorted()`` and ``list.sort()``
   (keys are extracted on every comparison).
 - ``order.sort(elements)`` which decorates every element once per step,
   sorts index positions against the precomputed keys and undecorates
   (DSU / Schwartzian transform).

Usage:
    by_status_then_name = (
        Order.by(lambda u: u.is_active, direction="desc")
        .by(lambda u: u.last_name)
        .by(lambda u: u.first_name)
    )
    users.sort(key=by_status_then_name.key)
    newest_first = Order.by(lambda u: u.created_at).reverse().sort(users)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from .types import Comparator, Direction, DirectionSign, KeyFunc, Predicate, direction_sign

__all__ = ["Order"]

_log = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K")


@dataclass(frozen=True)
class Step:
    """One ordering rule. Only created by :class:`Order` composition."""

    key: KeyFunc
    direction: DirectionSign = 1
    compare: Optional[Comparator] = None
    predicate: Optional[Predicate] = None

    def reversed(self) -> "Step":
        return replace(self, direction=-self.direction)


class _classorinstance:
    """Method descriptor with a separate implementation for class access.

    ``Order.by(...)`` starts a new order while ``order.by(...)`` appends to
    an existing one; both live under the same attribute name.
    """

    def __init__(self, on_class: Callable[..., Any]):
        self._on_class = on_class
        self._on_instance: Callable[..., Any] | None = None
        self.__doc__ = on_class.__doc__

    def instance(self, fn: Callable[..., Any]) -> "_classorinstance":
        self._on_instance = fn
        return self

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self._on_class.__get__(objtype, objtype)
        return self._on_instance.__get__(obj, objtype)  # type: ignore[union-attr]


def _always_equal(a: Any, b: Any) -> int:
    return 0


def _step_result(x: Any, y: Any, direction: int, compare: Optional[Comparator]) -> int:
    """Signed outcome of one step for keys ``x`` / ``y`` (0 means tie)."""
    if compare is not None:
        r = compare(x, y)
        if r != 0:
            # custom comparators may return any magnitude
            return direction if r > 0 else -direction
        return 0
    if x < y:
        return -direction
    if x > y:
        return direction
    return 0


def _lift(step: Step, outer: Callable[[Any], Any]) -> Step:
    inner_key = step.key
    inner_predicate = step.predicate
    predicate = None
    if inner_predicate is not None:
        predicate = lambda t: inner_predicate(outer(t))  # noqa: E731
    return Step(
        key=lambda t: inner_key(outer(t)),
        direction=step.direction,
        compare=step.compare,
        predicate=predicate,
    )


def _guard(step: Step, guard: Predicate) -> Step:
    existing = step.predicate
    if existing is None:
        return replace(step, predicate=guard)
    return replace(step, predicate=lambda v: existing(v) and guard(v))


class Order(Generic[T]):
    """Builder for immutable multi-step ordering rules.

    ``Order()`` is empty, ``Order(other)`` copies another order and
    ``Order([a, None, b])`` concatenates the steps of every non-empty entry.
    Every composition method returns a new instance; the receiver is never
    modified.
    """

    __slots__ = ("_steps",)

    def __init__(self, source: "Order[T] | Iterable[Optional[Order[T]]] | None" = None):
        if source is None:
            self._steps: Tuple[Step, ...] = ()
        elif isinstance(source, Order):
            self._steps = source._steps
        else:
            steps: List[Step] = []
            for s in source:
                if s is None or not s._steps:
                    continue
                steps.extend(s._steps)
            self._steps = tuple(steps)

    @classmethod
    def of(cls, source: "Order[T]") -> "Order[T]":
        """Copy of ``source`` sharing its (immutable) steps."""
        return cls._from_steps(source._steps)

    @classmethod
    def concat(cls, sources: Iterable[Optional["Order[T]"]]) -> "Order[T]":
        """Concatenate the steps of every order in ``sources``; ``None`` entries are skipped."""
        steps: List[Step] = []
        for s in sources:
            if s is None:
                continue
            steps.extend(s._steps)
        return cls._from_steps(steps)

    @classmethod
    def _from_steps(cls, steps: Iterable[Step]) -> "Order[T]":
        order = cls.__new__(cls)
        order._steps = tuple(steps)
        return order

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(steps={len(self._steps)})"

    # Composition -------------------------------------------------------

    @_classorinstance
    def by(
        cls,
        key: Callable[[T], K],
        *,
        direction: Direction | None = None,
        compare: Comparator | None = None,
        predicate: Predicate | None = None,
    ) -> "Order[T]":
        """Create a new order with a single step.

        Args:
            key: Extracts the comparison key from an element.
            direction: ``"asc"`` (default) or ``"desc"``.
            compare: Three-way comparator for the keys; natural ordering when omitted.
            predicate: Step only applies when both compared elements satisfy it.
        """
        return cls._from_steps((_make_step(key, direction, compare, predicate),))

    @by.instance
    def by(
        self,
        key: Callable[[T], K],
        *,
        direction: Direction | None = None,
        compare: Comparator | None = None,
        predicate: Predicate | None = None,
    ) -> "Order[T]":
        step = _make_step(key, direction, compare, predicate)
        return self._from_steps(self._steps + (step,))

    def reverse(self) -> "Order[T]":
        """Flip the direction of every step.

        Works both as ``order.reverse()`` and ``Order.reverse(order)``.
        """
        if not self._steps:
            return type(self)()
        return self._from_steps(step.reversed() for step in self._steps)

    @_classorinstance
    def map(cls, outer: Callable[[T], K], sub: "Order[K]") -> "Order[T]":
        """Lift an order defined over a nested value into the parent domain.

        ``outer`` extracts the nested value; every step of ``sub`` then runs
        against ``outer(parent)``, predicates included.
        """
        if not sub._steps:
            return cls()
        return cls._from_steps(_lift(step, outer) for step in sub._steps)

    @map.instance
    def map(self, outer: Callable[[T], K], sub: "Order[K]") -> "Order[T]":
        lifted = type(self).map(outer, sub)
        return self._from_steps(self._steps + lifted._steps)

    @_classorinstance
    def when(cls, guard: Predicate, inner: "Order[T]") -> "Order[T]":
        """Restrict every step of ``inner`` to pairs where both elements satisfy ``guard``.

        When either element fails the guard the guarded steps count as ties
        and comparison continues with whatever follows.
        """
        if not inner._steps:
            return cls()
        return cls._from_steps(_guard(step, guard) for step in inner._steps)

    @when.instance
    def when(self, guard: Predicate, inner: "Order[T]") -> "Order[T]":
        guarded = type(self).when(guard, inner)
        if not self._steps:
            return guarded
        if not guarded._steps:
            return type(self)(self)
        return self._from_steps(self._steps + guarded._steps)

    # Execution ---------------------------------------------------------

    @property
    def compare(self) -> Callable[[T, T], int]:
        """Comparator returning -1 / 0 / 1, usable with ``functools.cmp_to_key``."""
        steps = self._steps
        if not steps:
            return _always_equal

        def compare(a: T, b: T) -> int:
            for step in steps:
                predicate = step.predicate
                if predicate is not None and not (predicate(a) and predicate(b)):
                    continue
                r = _step_result(step.key(a), step.key(b), step.direction, step.compare)
                if r:
                    return r
            return 0

        return compare

    @property
    def key(self) -> Callable[[T], Any]:
        """Sort key wrapper for ``sorted(items, key=order.key)``."""
        return cmp_to_key(self.compare)

    @_classorinstance
    def sort(cls, elements: Sequence[T], order: "Order[T]") -> List[T]:
        """Return a new list with ``elements`` arranged by ``order``.

        Each key extractor runs once per element per step (never for elements
        rejected by the step predicate) and never inside the sort comparator.
        The input is not modified and ties keep their original relative order.
        """
        return order._decorate_sort_undecorate(elements)

    @sort.instance
    def sort(self, elements: Sequence[T]) -> List[T]:
        return self._decorate_sort_undecorate(elements)

    def _decorate_sort_undecorate(self, elements: Sequence[T]) -> List[T]:
        items = list(elements)
        steps = self._steps
        n = len(items)
        if n <= 1 or not steps:
            return items

        keys_per_step: List[List[Any]] = []
        matches_per_step: List[Optional[List[bool]]] = []
        for step in steps:
            key = step.key
            predicate = step.predicate
            if predicate is None:
                keys_per_step.append([key(item) for item in items])
                matches_per_step.append(None)
                continue
            keys: List[Any] = [None] * n
            matches = [False] * n
            for i, item in enumerate(items):
                if predicate(item):
                    matches[i] = True
                    keys[i] = key(item)
            keys_per_step.append(keys)
            matches_per_step.append(matches)

        _log.debug(
            "dsu sort: %d elements, %d steps (%d guarded)",
            n,
            len(steps),
            sum(1 for m in matches_per_step if m is not None),
        )

        plan = [
            (keys_per_step[j], matches_per_step[j], step.direction, step.compare)
            for j, step in enumerate(steps)
        ]

        def compare_indexes(ia: int, ib: int) -> int:
            for keys, matches, direction, compare in plan:
                if matches is not None and not (matches[ia] and matches[ib]):
                    continue
                r = _step_result(keys[ia], keys[ib], direction, compare)
                if r:
                    return r
            return 0

        indexes = sorted(range(n), key=cmp_to_key(compare_indexes))
        return [items[i] for i in indexes]


def _make_step(
    key: KeyFunc,
    direction: str | None,
    compare: Comparator | None,
    predicate: Predicate | None,
) -> Step:
    return Step(
        key=key,
        direction=direction_sign(direction),
        compare=compare,
        predicate=predicate,
    )
