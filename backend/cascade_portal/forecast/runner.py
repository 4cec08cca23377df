# backend/cascade_portal/forecast/runner.py
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from .cascade import calculate_cascade, load_inputs
from .writer import ForecastStoreWriter

logger = logging.getLogger(__name__)


class CompanyLocks:
    """
    One lock per company id; recalculations of the same company run one at a time.

    The guard covers callers sharing this registry inside one process only (the
    API keeps a single instance on app.state). Separate processes, such as
    scripts/recalculate_forecasts.py, are not serialized against it; the SQL
    replace still runs in a single transaction. One lock is kept per company id
    seen, for the life of the registry.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[int, threading.Lock] = {}

    def get(self, company_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(company_id)
            if lock is None:
                lock = self._locks[company_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, company_id: int) -> Iterator[None]:
        lock = self.get(company_id)
        with lock:
            yield


def recalculate_company(
    store,
    company_id: int,
    start_year: int = 2024,
    start_quarter: int = 1,
    forecast_years: int = 5,
    locks: Optional[CompanyLocks] = None,
    new_split_bp: int = 7000,
    upsell_split_bp: int = 3000,
) -> int:
    """
    Recompute the cascade for ``company_id`` and replace its stored forecasts.

    Without ``locks`` the call gets a private registry and is not serialized
    against any other caller.
    """
    locks = locks or CompanyLocks()
    writer = ForecastStoreWriter(store, new_split_bp=new_split_bp, upsell_split_bp=upsell_split_bp)

    with locks.hold(company_id):
        logger.info(
            "Recalculating company %s from %s-Q%s for %s years",
            company_id,
            start_year,
            start_quarter,
            forecast_years,
        )
        inputs = load_inputs(store, company_id)
        results = calculate_cascade(inputs, start_year, start_quarter, forecast_years)
        writer.save(company_id, results)

    return len(results)
