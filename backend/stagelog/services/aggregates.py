from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Sequence

from stagelog.coercion import to_float
from stagelog.schemas.performance import EXPENSE_FIELDS


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def median(values: Iterable[float]) -> float:
    ordered: Sequence[float] = sorted(values)
    size = len(ordered)
    if size == 0:
        return 0.0
    middle = size // 2
    if size % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return ordered[middle]


def percentage_change(old_value: float, new_value: float) -> str:
    """Percent change from ``old_value`` to ``new_value`` formatted to one decimal.

    A zero baseline cannot be divided by: growth from nothing reports "100",
    no growth reports "0".
    """
    old_value = to_float(old_value)
    new_value = to_float(new_value)
    if old_value == 0:
        return "100" if new_value > 0 else "0"
    change = ((new_value - old_value) / old_value) * 100
    return f"{change:.1f}"


def _round(value: float, places: str) -> float:
    return float(Decimal(repr(to_float(value))).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    return _round(value, "0.01")


def round1(value: float) -> float:
    return _round(value, "0.1")


def expense(performance: Any, field: str) -> float:
    if isinstance(performance, dict):
        return to_float(performance.get(field))
    return to_float(getattr(performance, field, 0.0))


def total_cost(performance: Any) -> float:
    return sum(expense(performance, field) for field in EXPENSE_FIELDS)
