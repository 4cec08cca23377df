# backend/cascade_portal/forecast/fixedpoint.py
from __future__ import annotations

import math
from typing import List, Sequence, Union

from .constants import BP_SCALE

Number = Union[int, float]


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves away from -inf (0.5 -> 1, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def apply_bp(value: Number, bp: int) -> float:
    """value * bp / 10000, kept fractional."""
    return value * bp / BP_SCALE


def scale_bp(bp: int, multiplier_bp: int) -> int:
    """Scale a basis-point rate by a fixed-point multiplier (10000 = 1.0x)."""
    return round_half_up(bp * multiplier_bp / BP_SCALE)


def percent_change(change: Number, base: Number) -> float:
    """(change / base) * 100, or 0.0 when base is not positive."""
    if base > 0:
        return change / base * 100
    return 0.0


def percent_to_bp(percent: float) -> int:
    return round_half_up(percent * 100)


def normalize_to_scale(values: Sequence[int], scale: int = BP_SCALE) -> List[int]:
    """
    Proportionally rescale integers so they sum to exactly ``scale``.

    Largest-remainder rounding: every value is floored, then the missing units go
    to the largest remainders (ties to the earlier position). Requires a positive total.
    """
    total = sum(values)
    if total <= 0:
        raise ValueError("cannot normalize values with a non-positive total")

    parts = [divmod(v * scale, total) for v in values]
    out = [q for q, _ in parts]
    missing = scale - sum(out)
    order = sorted(range(len(values)), key=lambda i: (-parts[i][1], i))
    for i in order[:missing]:
        out[i] += 1
    return out


def clamp_bp(value: int, lo: int = 0, hi: int = BP_SCALE) -> int:
    return max(lo, min(hi, value))
