# backend/cascade_portal/forecast/periods.py
from __future__ import annotations

from typing import Iterator, Tuple

from .errors import InvalidPeriodError

Period = Tuple[int, int]  # (year, quarter)


def _check_quarter(quarter: int) -> None:
    if not (1 <= quarter <= 4):
        raise InvalidPeriodError(f"Quarter must be in 1..4, got {quarter}")


def next_quarter(year: int, quarter: int) -> Period:
    _check_quarter(quarter)
    if quarter == 4:
        return year + 1, 1
    return year, quarter + 1


def advance(year: int, quarter: int, n: int) -> Period:
    """(year, quarter) moved ``n`` quarters forward."""
    if n < 0:
        raise InvalidPeriodError(f"Cannot advance by a negative count ({n})")
    _check_quarter(quarter)
    for _ in range(n):
        year, quarter = next_quarter(year, quarter)
    return year, quarter


def horizon(year: int, quarter: int, count: int) -> Iterator[Period]:
    """``count`` consecutive quarters starting at (year, quarter)."""
    _check_quarter(quarter)
    current = (year, quarter)
    for _ in range(count):
        yield current
        current = next_quarter(*current)


def quarters_between(source: Period, target: Period) -> int:
    """Signed distance in quarters from ``source`` to ``target``."""
    return (target[0] - source[0]) * 4 + (target[1] - source[1])


def quarter_key(year: int, quarter: int) -> str:
    return f"{year:04d}-Q{quarter}"

