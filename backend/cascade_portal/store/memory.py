# backend/cascade_portal/store/memory.py
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from ..forecast.types import (
    ConversionRate,
    DealEconomics,
    ForecastRow,
    HistoricalVolume,
    LeadType,
    Region,
    ScenarioRecord,
    TimeDistribution,
)


class MemoryForecastStore:
    """
    In-process ForecastStore. Each instance is independent; inject it where
    a database is not wanted (tests, STORE_BACKEND=memory).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_id = 1
        self.regions: Dict[int, Region] = {}
        self.lead_types: Dict[int, LeadType] = {}
        self.history: Dict[Tuple[int, int, int, int, int], HistoricalVolume] = {}
        self.conversion_rates: Dict[Tuple[int, int, int], ConversionRate] = {}
        self.deal_economics: Dict[Tuple[int, int], DealEconomics] = {}
        self.time_distributions: Dict[Tuple[int, int], TimeDistribution] = {}
        self.forecasts: Dict[int, List[ForecastRow]] = {}
        self.scenarios: Dict[int, ScenarioRecord] = {}

    def _new_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # ---------------------------
    # Seeding helpers
    # ---------------------------
    def add_region(self, company_id: int, name: str, display_name: Optional[str] = None, enabled: bool = True) -> Region:
        with self._lock:
            r = Region(self._new_id(), company_id, name, display_name or name, enabled)
            self.regions[r.id] = r
            return r

    def add_lead_type(self, company_id: int, name: str, display_name: Optional[str] = None, enabled: bool = True) -> LeadType:
        with self._lock:
            t = LeadType(self._new_id(), company_id, name, display_name or name, enabled)
            self.lead_types[t.id] = t
            return t

    def upsert_history(self, row: HistoricalVolume) -> None:
        key = (row.company_id, row.region_id, row.lead_type_id, row.year, row.quarter)
        with self._lock:
            self.history[key] = row

    def upsert_conversion_rate(self, row: ConversionRate) -> None:
        with self._lock:
            self.conversion_rates[(row.company_id, row.region_id, row.lead_type_id)] = row

    def upsert_deal_economics(self, row: DealEconomics) -> None:
        with self._lock:
            self.deal_economics[(row.company_id, row.region_id)] = row

    def upsert_time_distribution(self, row: TimeDistribution) -> None:
        with self._lock:
            self.time_distributions[(row.company_id, row.lead_type_id)] = row

    # ---------------------------
    # Reads
    # ---------------------------
    def _snapshot(self, table: Dict) -> list:
        # copy under the lock, iterate outside it
        with self._lock:
            return list(table.values())

    def get_regions(self, company_id: int) -> List[Region]:
        return [r for r in self._snapshot(self.regions) if r.company_id == company_id]

    def get_lead_types(self, company_id: int) -> List[LeadType]:
        return [t for t in self._snapshot(self.lead_types) if t.company_id == company_id]

    def get_history(self, company_id: int) -> List[HistoricalVolume]:
        return [h for h in self._snapshot(self.history) if h.company_id == company_id]

    def get_conversion_rates(self, company_id: int) -> List[ConversionRate]:
        return [cr for cr in self._snapshot(self.conversion_rates) if cr.company_id == company_id]

    def get_deal_economics(self, company_id: int) -> List[DealEconomics]:
        return [de for de in self._snapshot(self.deal_economics) if de.company_id == company_id]

    def get_time_distributions(self, company_id: int) -> List[TimeDistribution]:
        return [td for td in self._snapshot(self.time_distributions) if td.company_id == company_id]

    # ---------------------------
    # Forecasts
    # ---------------------------
    def get_forecasts(self, company_id: int) -> List[ForecastRow]:
        with self._lock:
            rows = list(self.forecasts.get(company_id, []))
        return sorted(rows, key=lambda f: (f.year, f.quarter, f.region_id, f.lead_type_id))

    def replace_forecasts(self, company_id: int, rows: Sequence[ForecastRow]) -> int:
        # last write per key wins, like an upsert on the unique key
        by_key = {(f.region_id, f.lead_type_id, f.year, f.quarter): f for f in rows}
        with self._lock:
            self.forecasts[company_id] = list(by_key.values())
        return len(by_key)

    # ---------------------------
    # Scenarios
    # ---------------------------
    def create_scenario(self, record: ScenarioRecord) -> ScenarioRecord:
        with self._lock:
            saved = replace(record, id=self._new_id(), created_at=datetime.now(timezone.utc))
            self.scenarios[saved.id] = saved
            return saved

    def list_scenarios(self, company_id: int) -> List[ScenarioRecord]:
        rows = [s for s in self._snapshot(self.scenarios) if s.company_id == company_id]
        return sorted(rows, key=lambda s: s.id, reverse=True)

    def get_scenario(self, scenario_id: int) -> Optional[ScenarioRecord]:
        with self._lock:
            return self.scenarios.get(scenario_id)

    def update_scenario(
        self, scenario_id: int, name: Optional[str] = None, description: Optional[str] = None
    ) -> Optional[ScenarioRecord]:
        with self._lock:
            rec = self.scenarios.get(scenario_id)
            if rec is None:
                return None
            if name is not None:
                rec = replace(rec, name=name)
            if description is not None:
                rec = replace(rec, description=description)
            self.scenarios[scenario_id] = rec
            return rec

    def delete_scenario(self, scenario_id: int) -> bool:
        with self._lock:
            return self.scenarios.pop(scenario_id, None) is not None
