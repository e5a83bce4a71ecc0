"""
Numeric primitives for diagram analytics.

Every helper is null/zero guarded: empty input yields 0 (or None where a
missing value is meaningful, e.g. the median) and never raises or returns NaN.
Rounding is half-up, so 0.25 -> 0.3 and -0.25 -> -0.2.
"""

import math
from typing import Iterable, List, Optional, Sequence


def is_finite_number(value) -> bool:
    """True for real ints/floats that are not NaN or infinite (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def as_number(value) -> float:
    """Coerce a possibly-missing value to a finite number, defaulting to 0."""
    return value if is_finite_number(value) else 0


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0
    return sum(values) / len(values)


def variance(values: Sequence[float]) -> float:
    """Sample variance (n - 1 denominator); 0 for fewer than two values."""
    n = len(values)
    if n <= 1:
        return 0
    m = mean(values)
    return sum((v - m) ** 2 for v in values) / (n - 1)


def stdev(values: Sequence[float]) -> float:
    return math.sqrt(variance(values))


def median(values: Iterable[Optional[float]]) -> Optional[float]:
    """Median of the finite values, or None when there are none."""
    ordered = sorted(v for v in values if is_finite_number(v))
    if not ordered:
        return None
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def quantile(values: Sequence[float], q: float) -> float:
    """
    Linear-interpolated quantile.

    Sorts ascending, takes pos = (n - 1) * q and interpolates between
    floor(pos) and floor(pos) + 1. Returns 0 for empty input.
    """
    if not values:
        return 0
    ordered: List[float] = sorted(values)
    pos = (len(ordered) - 1) * q
    base = math.floor(pos)
    rest = pos - base
    if base + 1 < len(ordered):
        return ordered[base] + rest * (ordered[base + 1] - ordered[base])
    return ordered[base]


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round1(value: float) -> float:
    return round_half_up(value, 1)


def round2(value: float) -> float:
    return round_half_up(value, 2)


def ratio_pct(part: float, total: float) -> float:
    """Unrounded percentage, 0 when total is 0."""
    return part * 100 / total if total else 0


def pct_num(part: float, total: float) -> float:
    """Percentage rounded to one decimal, 0 when total is 0."""
    return round1(ratio_pct(part, total))
