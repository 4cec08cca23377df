# backend/cascade_portal/store/base.py
from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

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


class ForecastStore(Protocol):
    """
    Data-access interface the forecast core reads from and writes to.

    Implementations:
      * MemoryForecastStore  (store/memory.py) – tests / STORE_BACKEND=memory
      * SqlForecastStore     (store/sql.py)    – SQLAlchemy session
    """

    # ---- inputs (read-only for the core) ----
    def get_regions(self, company_id: int) -> List[Region]: ...

    def get_lead_types(self, company_id: int) -> List[LeadType]: ...

    def get_history(self, company_id: int) -> List[HistoricalVolume]: ...

    def get_conversion_rates(self, company_id: int) -> List[ConversionRate]: ...

    def get_deal_economics(self, company_id: int) -> List[DealEconomics]: ...

    def get_time_distributions(self, company_id: int) -> List[TimeDistribution]: ...

    # ---- forecasts (owned by the core) ----
    def get_forecasts(self, company_id: int) -> List[ForecastRow]: ...

    def replace_forecasts(self, company_id: int, rows: Sequence[ForecastRow]) -> int:
        """Delete every forecast of ``company_id`` and insert ``rows`` as one unit."""
        ...

    # ---- named scenarios ----
    def create_scenario(self, record: ScenarioRecord) -> ScenarioRecord: ...

    def list_scenarios(self, company_id: int) -> List[ScenarioRecord]: ...

    def get_scenario(self, scenario_id: int) -> Optional[ScenarioRecord]: ...

    def update_scenario(
        self, scenario_id: int, name: Optional[str] = None, description: Optional[str] = None
    ) -> Optional[ScenarioRecord]:
        """Rename and/or re-describe a saved scenario; None when it does not exist."""
        ...

    def delete_scenario(self, scenario_id: int) -> bool: ...
