"""Sort Profiling Harness

Benchmarks the three ways of applying a multi-step ordering over a synthetic
user dataset so regressions (time, memory or redundant key extraction) can
be spotted:

 - ``compare``: ``sorted(users, key=order.key)``, keys extracted per comparison
 - ``dsu``: ``order.sort(users)``, keys extracted once per element per step
 - ``combinators``: ``sorted`` with a chain built from :mod:`orderkit.comparators`

Timing is wall clock ``perf_counter`` (best of ``repeat`` runs), peak memory
is captured with ``tracemalloc`` and every key extractor is wrapped with a
counter so the key-call budget of each strategy is visible.

The dataset is generated from a seeded ``random.Random`` and defaults to a
size that keeps a full run well under a second.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional
import logging
import random
import time
import tracemalloc

from . import comparators as cmp
from .config import settings
from .order import Order
from .types import Comparator

__all__ = [
    "User",
    "KeyCallCounter",
    "SortProfilingResult",
    "synthetic_users",
    "build_user_order",
    "build_user_comparator",
    "run_sort_profiling",
]

_log = logging.getLogger(__name__)

ROLE_RANK: Dict[str, int] = {"admin": 0, "manager": 1, "staff": 2, "guest": 3}

_FIRST_NAMES = ["Ada", "alan", "Grace", "edsger", "Barbara", "donald", "Frances", "ken"]
_LAST_NAMES = ["Lovelace", "turing", "Hopper", "dijkstra", "Liskov", "knuth", "Allen", "thompson"]
_CITIES = ["Perth", "Leipzig", "Lisbon", "Osaka", "Quito"]


@dataclass(frozen=True)
class User:
    id: int
    first_name: str
    last_name: str
    age: Optional[int]
    is_active: bool
    role: str
    created_at: datetime
    city: str


@dataclass(frozen=True)
class SortProfilingResult:
    dataset: Dict[str, Any]
    durations: Dict[str, float]
    key_calls: Dict[str, int]
    peak_memory_bytes: Dict[str, int]
    results_agree: bool
    dsu_speedup_ratio: float | None


class KeyCallCounter:
    """Wraps key extractors and counts how often they run."""

    def __init__(self):
        self.calls = 0

    def wrap(self, fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
        def counted(value):
            self.calls += 1
            return fn(value)

        return counted

    def reset(self) -> int:
        calls, self.calls = self.calls, 0
        return calls


def synthetic_users(count: int, *, seed: int = 42) -> List[User]:
    """Generate ``count`` users with plenty of ties on the leading keys.

    About one in ten users has no age so null handling is exercised.
    """
    rng = random.Random(seed)
    epoch = datetime(2020, 1, 1, tzinfo=timezone.utc)
    roles = list(ROLE_RANK)
    users: List[User] = []
    for i in range(count):
        users.append(
            User(
                id=i + 1,
                first_name=rng.choice(_FIRST_NAMES),
                last_name=rng.choice(_LAST_NAMES),
                age=None if rng.random() < 0.1 else rng.randint(18, 80),
                is_active=rng.random() < 0.7,
                role=rng.choice(roles),
                created_at=epoch + timedelta(days=rng.randint(0, 365 * 4)),
                city=rng.choice(_CITIES),
            )
        )
    return users


def _case_insensitive(a: str, b: str) -> int:
    return cmp.compare(a.casefold(), b.casefold())


def build_user_order(wrap: Callable[[Callable], Callable] = lambda fn: fn) -> Order[User]:
    """Representative seven step order: active first, role rank, names, age, newest, id."""
    return (
        Order.by(wrap(lambda u: u.is_active), direction="desc")
        .by(wrap(lambda u: ROLE_RANK[u.role]))
        .by(wrap(lambda u: u.last_name), compare=_case_insensitive)
        .by(wrap(lambda u: u.first_name), compare=_case_insensitive)
        .by(wrap(lambda u: u.age), compare=cmp.nulls_last(cmp.number))
        .by(wrap(lambda u: u.created_at), direction="desc")
        .by(wrap(lambda u: u.id))
    )


def build_user_comparator(wrap: Callable[[Callable], Callable] = lambda fn: fn) -> Comparator:
    """Same ordering as :func:`build_user_order` expressed with comparator combinators."""
    return cmp.order(
        cmp.by(wrap(lambda u: u.is_active), direction="desc", compare=cmp.boolean),
        cmp.by(wrap(lambda u: ROLE_RANK[u.role])),
        cmp.by(wrap(lambda u: u.last_name), compare=_case_insensitive),
        cmp.by(wrap(lambda u: u.first_name), compare=_case_insensitive),
        cmp.by(wrap(lambda u: u.age), compare=cmp.nulls_last(cmp.number)),
        cmp.by(wrap(lambda u: u.created_at), direction="desc", compare=cmp.date),
        cmp.by(wrap(lambda u: u.id)),
    )


def _best_of(repeat: int, fn: Callable[[], Any]) -> float:
    best = float("inf")
    for _ in range(max(repeat, 1)):
        t0 = time.perf_counter()
        fn()
        best = min(best, time.perf_counter() - t0)
    return best


def _peak_memory(fn: Callable[[], Any]) -> int:
    tracemalloc.start()
    try:
        fn()
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    return peak


def run_sort_profiling(
    *,
    size: int | None = None,
    seed: int | None = None,
    repeat: int | None = None,
) -> SortProfilingResult:
    """Execute every profiling phase and return a structured result.

    Parameters
    ----------
    size : int | None
        Number of synthetic users (defaults to ``settings.PROFILE_SIZE``).
    seed : int | None
        Dataset seed (defaults to ``settings.PROFILE_SEED``).
    repeat : int | None
        Timed runs per strategy; the fastest is reported.
    """
    size = size if size is not None else settings.PROFILE_SIZE
    seed = seed if seed is not None else settings.PROFILE_SEED
    repeat = repeat if repeat is not None else settings.PROFILE_REPEAT

    # 1. Data generation --------------------------------------------------
    users = synthetic_users(size, seed=seed)
    counter = KeyCallCounter()
    order = build_user_order(counter.wrap)
    chain = build_user_comparator(counter.wrap)

    strategies: Dict[str, Callable[[], List[User]]] = {
        "compare": lambda: sorted(users, key=order.key),
        "dsu": lambda: order.sort(users),
        "combinators": lambda: sorted(users, key=cmp_to_key(chain)),
    }

    # 2. Key-call budget + result agreement (single untimed pass) ---------
    key_calls: Dict[str, int] = {}
    outputs: Dict[str, List[User]] = {}
    for name, run in strategies.items():
        counter.reset()
        outputs[name] = run()
        key_calls[name] = counter.reset()
    reference = [u.id for u in outputs["compare"]]
    results_agree = all([u.id for u in out] == reference for out in outputs.values())

    # 3. Timings ----------------------------------------------------------
    durations: Dict[str, float] = {}
    for name, run in strategies.items():
        durations[name] = _best_of(repeat, run)
        _log.debug("profiling %s: %.4fs over %d users", name, durations[name], size)
    counter.reset()

    # 4. Peak memory ------------------------------------------------------
    peak_memory = {name: _peak_memory(run) for name, run in strategies.items()}
    counter.reset()

    speedup = durations["compare"] / durations["dsu"] if durations["dsu"] > 0 else None
    return SortProfilingResult(
        dataset={"size": size, "seed": seed, "repeat": repeat, "steps": len(order)},
        durations=durations,
        key_calls=key_calls,
        peak_memory_bytes=peak_memory,
        results_agree=results_agree,
        dsu_speedup_ratio=speedup,
    )
