# backend/cascade_portal/forecast/writer.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import BP_SCALE, OPPORTUNITY_PRECISION_MULTIPLIER
from .errors import UnknownDimensionError
from .fixedpoint import apply_bp, round_half_up
from .types import CascadeResult, ForecastRow

logger = logging.getLogger(__name__)


def build_forecast_rows(
    company_id: int,
    results: Sequence[CascadeResult],
    region_ids: Dict[str, int],
    lead_type_ids: Dict[str, int],
    new_split_bp: int = 7000,
    upsell_split_bp: int = 3000,
) -> List[ForecastRow]:
    """
    Map cascade results onto storable rows.

    Every result must resolve; otherwise UnknownDimensionError is raised and
    nothing is returned (so nothing gets written).
    """
    missing: List[Tuple[str, str]] = []
    rows: List[ForecastRow] = []

    for res in results:
        region_id = region_ids.get(res.region)
        lead_type_id = lead_type_ids.get(res.lead_type)
        if region_id is None or lead_type_id is None:
            missing.append((res.region, res.lead_type))
            continue

        exact = res.opportunities_exact or float(res.opportunities)
        rows.append(
            ForecastRow(
                company_id=company_id,
                region_id=region_id,
                lead_type_id=lead_type_id,
                year=res.year,
                quarter=res.quarter,
                predicted_leads=res.sql_volume,
                predicted_opportunities=round_half_up(exact * OPPORTUNITY_PRECISION_MULTIPLIER),
                predicted_revenue_new=round_half_up(apply_bp(res.revenue, new_split_bp)),
                predicted_revenue_upsell=round_half_up(apply_bp(res.revenue, upsell_split_bp)),
            )
        )

    if missing:
        raise UnknownDimensionError(company_id, missing)
    return rows


class ForecastStoreWriter:
    """Full-replace writer: the company ends up with exactly the given results."""

    def __init__(self, store, new_split_bp: int = 7000, upsell_split_bp: Optional[int] = None):
        self.store = store
        self.new_split_bp = new_split_bp
        self.upsell_split_bp = BP_SCALE - new_split_bp if upsell_split_bp is None else upsell_split_bp

    def save(self, company_id: int, results: Sequence[CascadeResult]) -> int:
        # Resolve against every region / lead type, enabled or not
        region_ids = {r.name: r.id for r in self.store.get_regions(company_id)}
        lead_type_ids = {t.name: t.id for t in self.store.get_lead_types(company_id)}

        rows = build_forecast_rows(
            company_id,
            results,
            region_ids,
            lead_type_ids,
            new_split_bp=self.new_split_bp,
            upsell_split_bp=self.upsell_split_bp,
        )
        written = self.store.replace_forecasts(company_id, rows)
        logger.info("Replaced forecasts for company %s with %d rows", company_id, written)
        return written
