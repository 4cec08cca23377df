# backend/cascade_portal/forecast/cascade.py
"""
Cascade calculator: lead volume -> opportunities -> revenue.

Per target quarter Q and (region, lead type):
  * base opportunities of a source quarter = volume * coverage / 10000
  * opportunities landing in Q come from the leads of Q, Q-1 and Q-2, weighted
    by the lead type's same/next/two-quarter percentages. Quarters before the
    forecast start contribute nothing.
  * revenue = opportunities * win_rate_new / 10000 * acv_new (rounded to cents)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .constants import (
    DEFAULT_ACV_NEW_CENTS,
    DEFAULT_ACV_UPSELL_CENTS,
    DEFAULT_COVERAGE_RATIO_BP,
    DEFAULT_NEXT_QUARTER_PCT,
    DEFAULT_SAME_QUARTER_PCT,
    DEFAULT_TWO_QUARTER_PCT,
    DEFAULT_WIN_RATE_NEW_BP,
    DEFAULT_WIN_RATE_UPSELL_BP,
)
from .fixedpoint import apply_bp, round_half_up
from .periods import advance, horizon
from .types import (
    CascadeResult,
    ConversionRate,
    DealEconomics,
    HistoricalVolume,
    LeadType,
    Region,
    TimeDistribution,
)

logger = logging.getLogger(__name__)

VolumeKey = Tuple[int, int, int, int]  # region_id, lead_type_id, year, quarter


@dataclass
class CascadeInputs:
    """Everything the calculators read for one company."""

    company_id: int
    regions: List[Region] = field(default_factory=list)
    lead_types: List[LeadType] = field(default_factory=list)
    history: List[HistoricalVolume] = field(default_factory=list)
    conversion_rates: List[ConversionRate] = field(default_factory=list)
    deal_economics: List[DealEconomics] = field(default_factory=list)
    time_distributions: List[TimeDistribution] = field(default_factory=list)

    @property
    def enabled_regions(self) -> List[Region]:
        return [r for r in self.regions if r.enabled]

    @property
    def enabled_lead_types(self) -> List[LeadType]:
        return [t for t in self.lead_types if t.enabled]

    def volume_map(self) -> Dict[VolumeKey, int]:
        return {(h.region_id, h.lead_type_id, h.year, h.quarter): h.volume for h in self.history}

    def rate_map(self) -> Dict[Tuple[int, int], ConversionRate]:
        return {(cr.region_id, cr.lead_type_id): cr for cr in self.conversion_rates}

    def economics_map(self) -> Dict[int, DealEconomics]:
        return {de.region_id: de for de in self.deal_economics}

    def distribution_map(self) -> Dict[int, TimeDistribution]:
        return {td.lead_type_id: td for td in self.time_distributions}


def load_inputs(store, company_id: int) -> CascadeInputs:
    return CascadeInputs(
        company_id=company_id,
        regions=store.get_regions(company_id),
        lead_types=store.get_lead_types(company_id),
        history=store.get_history(company_id),
        conversion_rates=store.get_conversion_rates(company_id),
        deal_economics=store.get_deal_economics(company_id),
        time_distributions=store.get_time_distributions(company_id),
    )


# ---------- defaults ----------
def default_conversion_rate(company_id: int, region_id: int, lead_type_id: int) -> ConversionRate:
    return ConversionRate(
        company_id=company_id,
        region_id=region_id,
        lead_type_id=lead_type_id,
        coverage_ratio=DEFAULT_COVERAGE_RATIO_BP,
        win_rate_new=DEFAULT_WIN_RATE_NEW_BP,
        win_rate_upsell=DEFAULT_WIN_RATE_UPSELL_BP,
    )


def default_deal_economics(company_id: int, region_id: int) -> DealEconomics:
    return DealEconomics(
        company_id=company_id,
        region_id=region_id,
        acv_new=DEFAULT_ACV_NEW_CENTS,
        acv_upsell=DEFAULT_ACV_UPSELL_CENTS,
    )


def default_time_distribution(company_id: int, lead_type_id: int) -> TimeDistribution:
    return TimeDistribution(
        company_id=company_id,
        lead_type_id=lead_type_id,
        same_quarter_pct=DEFAULT_SAME_QUARTER_PCT,
        next_quarter_pct=DEFAULT_NEXT_QUARTER_PCT,
        two_quarter_pct=DEFAULT_TWO_QUARTER_PCT,
    )


def warn_incomplete_distributions(dists: Dict[int, TimeDistribution]) -> None:
    for td in dists.values():
        if not td.is_complete:
            logger.warning(
                "Time distribution for lead type %s sums to %s bp, not 10000",
                td.lead_type_id,
                td.total,
            )


# ---------- main entry ----------
def calculate_cascade(
    inputs: CascadeInputs,
    start_year: int,
    start_quarter: int,
    forecast_years: int,
) -> List[CascadeResult]:
    """One result per (quarter, region, lead type) over ``4 * forecast_years`` quarters."""
    company_id = inputs.company_id
    regions = inputs.enabled_regions
    lead_types = inputs.enabled_lead_types
    volumes = inputs.volume_map()
    rates = inputs.rate_map()
    economics = inputs.economics_map()
    dists = inputs.distribution_map()
    warn_incomplete_distributions(dists)

    def volume_at(region_id: int, lead_type_id: int, offset: int) -> Optional[int]:
        y, q = advance(start_year, start_quarter, offset)
        return volumes.get((region_id, lead_type_id, y, q))

    results: List[CascadeResult] = []
    quarters = list(horizon(start_year, start_quarter, forecast_years * 4))

    for offset, (year, quarter) in enumerate(quarters):
        for region in regions:
            econ = economics.get(region.id) or default_deal_economics(company_id, region.id)

            for lead_type in lead_types:
                rate = rates.get((region.id, lead_type.id)) or default_conversion_rate(
                    company_id, region.id, lead_type.id
                )
                dist = dists.get(lead_type.id) or default_time_distribution(company_id, lead_type.id)

                sql_volume = volumes.get((region.id, lead_type.id, year, quarter), 0)

                # leads of Q itself
                total_opps = apply_bp(apply_bp(sql_volume, rate.coverage_ratio), dist.same_quarter_pct)

                # leads of Q-1 / Q-2, only inside the horizon
                for lag, pct in ((1, dist.next_quarter_pct), (2, dist.two_quarter_pct)):
                    if offset < lag:
                        continue
                    prev = volume_at(region.id, lead_type.id, offset - lag)
                    if prev is None:
                        continue
                    total_opps += apply_bp(apply_bp(prev, rate.coverage_ratio), pct)

                closed_won = apply_bp(total_opps, rate.win_rate_new)
                revenue = round_half_up(closed_won * econ.acv_new)

                results.append(
                    CascadeResult(
                        region=region.name,
                        lead_type=lead_type.name,
                        year=year,
                        quarter=quarter,
                        sql_volume=sql_volume,
                        opportunities=round_half_up(total_opps),
                        revenue=revenue,
                        opportunities_exact=total_opps,
                    )
                )

    logger.debug(
        "Cascade for company %s: %d regions x %d lead types x %d quarters",
        company_id,
        len(regions),
        len(lead_types),
        len(quarters),
    )
    return results
