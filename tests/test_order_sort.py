import math
import random
from dataclasses import dataclass
from functools import cmp_to_key

from orderkit import Order
from orderkit import comparators as cmp


@dataclass(frozen=True)
class Row:
    id: int
    group: str
    score: float
    active: bool = True


def _rows(count=60, seed=7):
    rng = random.Random(seed)
    return [
        Row(
            id=i,
            group=rng.choice("abc"),
            score=rng.choice([1.0, 2.0, 3.0, math.nan]),
            active=rng.random() < 0.6,
        )
        for i in range(count)
    ]


def test_primary_then_secondary_scenario():
    items = [
        {"primary": 1, "secondary": "b"},
        {"primary": 1, "secondary": "a"},
        {"primary": 0, "secondary": "z"},
    ]
    order = Order.by(lambda r: r["primary"]).by(lambda r: r["secondary"])
    assert order.sort(items) == [
        {"primary": 0, "secondary": "z"},
        {"primary": 1, "secondary": "a"},
        {"primary": 1, "secondary": "b"},
    ]


def test_short_inputs_return_a_copy():
    order = Order.by(lambda x: x)
    single = [1]
    out = Order.sort(single, order)
    assert out == [1]
    assert out is not single
    empty = []
    assert Order.sort(empty, order) == []
    assert Order.sort(empty, order) is not empty


def test_zero_steps_returns_copy_in_original_order():
    data = [3, 1, 2]
    out = Order().sort(data)
    assert out == [3, 1, 2]
    assert out is not data


def test_numbers_ascending_and_descending():
    data = [5, 1, 4, 2, 3]
    assert Order.by(lambda x: x).sort(data) == [1, 2, 3, 4, 5]
    assert Order.by(lambda x: x, direction="desc").sort(data) == [5, 4, 3, 2, 1]
    assert data == [5, 1, 4, 2, 3]


def test_accepts_any_sequence():
    assert Order.by(lambda x: x).sort((3, 1, 2)) == [1, 2, 3]


def test_input_is_not_mutated():
    rows = _rows()
    snapshot = list(rows)
    Order.by(lambda r: r.group).by(lambda r: r.score, compare=cmp.number).sort(rows)
    assert rows == snapshot


def test_keys_computed_once_per_element_per_step():
    calls = {"value": 0, "label": 0}

    def value(item):
        calls["value"] += 1
        return item[0]

    def label(item):
        calls["label"] += 1
        return item[1]

    data = [(2, "b"), (1, "z"), (2, "a"), (1, "y"), (3, "c")]
    out = Order.by(value).by(label, direction="desc").sort(data)
    assert out == [(1, "z"), (1, "y"), (2, "b"), (2, "a"), (3, "c")]
    assert calls == {"value": 5, "label": 5}


def test_predicate_rejected_elements_never_extract_keys():
    seen = []

    def key(item):
        seen.append(item)
        return item["score"]

    data = [
        {"id": 1, "score": 5, "ok": True},
        {"id": 2, "score": 1, "ok": False},
        {"id": 3, "score": 3, "ok": True},
        {"id": 4, "score": 0, "ok": False},
    ]
    order = Order.by(key, predicate=lambda r: r["ok"])
    order.sort(data)
    assert len(seen) == 2
    assert all(r["ok"] for r in seen)


def test_predicate_steps_keep_stability():
    calls = []

    def score(item):
        calls.append(item)
        return item["score"]

    order = Order.by(score, predicate=lambda r: r["score"] is not None)
    data = [
        {"id": 1, "score": None},
        {"id": 2, "score": 10},
        {"id": 3, "score": 5},
        {"id": 4, "score": None},
    ]
    assert order.compare(data[2], data[1]) < 0
    calls.clear()

    out = Order.sort(data, order)
    assert len(calls) == 2
    assert [r for r in out if r["score"] is None] == [data[0], data[3]]
    assert [r for r in out if r["score"] is not None] == [data[2], data[1]]
    assert out == sorted(data, key=order.key)


def test_stable_for_equal_keys():
    data = [("x", 1), ("y", 0), ("x", 0), ("y", 1), ("x", 2)]
    out = Order.by(lambda t: t[0]).sort(data)
    assert out == [("x", 1), ("x", 0), ("x", 2), ("y", 0), ("y", 1)]


def test_custom_comparator_magnitude_is_normalised():
    data = ["ccc", "a", "bb"]
    order = Order.by(lambda s: s, compare=lambda a, b: (len(a) - len(b)) * 1000, direction="desc")
    assert order.sort(data) == ["ccc", "bb", "a"]


def test_static_and_instance_sort_agree():
    rows = _rows()
    order = Order.by(lambda r: r.group).by(lambda r: r.id, direction="desc")
    assert Order.sort(rows, order) == order.sort(rows)


def test_sort_matches_sorted_with_compare():
    rows = _rows(count=120, seed=11)
    orders = [
        Order.by(lambda r: r.group),
        Order.by(lambda r: r.group, direction="desc").by(lambda r: r.score, compare=cmp.number),
        Order.by(lambda r: r.score, compare=cmp.nans_last(cmp.compare), predicate=lambda r: r.active)
        .by(lambda r: r.group)
        .by(lambda r: r.id, direction="desc"),
        Order.by(lambda r: r.active, direction="desc").when(
            lambda r: r.group == "a", Order.by(lambda r: r.score, compare=cmp.number)
        ),
        Order.map(lambda r: r.group, Order.by(lambda g: g, predicate=lambda g: g != "c")).by(
            lambda r: r.id
        ),
    ]
    for order in orders:
        expected = sorted(rows, key=cmp_to_key(order.compare))
        assert order.sort(rows) == expected
        assert order.reverse().sort(rows) == sorted(rows, key=order.reverse().key)


def test_predicate_key_budget_matches_excluded_count():
    rows = _rows(count=50, seed=3)
    calls = []
    order = Order.by(lambda r: calls.append(r) or r.id, predicate=lambda r: r.active)
    order.sort(rows)
    excluded = sum(1 for r in rows if not r.active)
    assert len(calls) == len(rows) - excluded
