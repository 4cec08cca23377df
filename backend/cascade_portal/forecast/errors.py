# backend/cascade_portal/forecast/errors.py
from typing import Iterable, Tuple


class ForecastError(Exception):
    """Base class for errors raised by the forecast core."""


class InvalidPeriodError(ForecastError, ValueError):
    pass


class UnknownDimensionError(ForecastError):
    """A cascade result names a region or lead type the company does not have."""

    def __init__(self, company_id: int, missing: Iterable[Tuple[str, str]]):
        self.company_id = company_id
        self.missing = sorted(set(missing))
        pairs = ", ".join(f"{r}/{t}" for r, t in self.missing)
        super().__init__(f"Invalid region or lead type for company {company_id}: {pairs}")
