# backend/cascade_portal/forecast/whatif.py
"""
What-if recalculator.

A simpler cascade than cascade.py, used only for scenario comparison:
  * projects the ``horizon`` quarters after the latest historical quarter
  * every historical row contributes to a target quarter through its lag
    (0 / 1 / 2 quarters -> same / next / two-quarter percentage)
  * revenue uses the mean of new/upsell win rates and the mean of new/upsell
    ACVs, unlike the new-business-only revenue of the persisted forecast

Results are aggregated per quarter (all regions and lead types summed).
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from .adjustments import apply_adjustment
from .cascade import (
    CascadeInputs,
    default_conversion_rate,
    default_deal_economics,
    default_time_distribution,
    load_inputs,
    warn_incomplete_distributions,
)
from .constants import BP_SCALE, OPPORTUNITY_PRECISION_MULTIPLIER
from .fixedpoint import round_half_up
from .impact import compare
from .periods import Period, advance, horizon, quarters_between
from .types import ForecastRow, HistoricalVolume, QuarterTotal, ScenarioAdjustment, WhatIfResult

logger = logging.getLogger(__name__)

BaselineMode = Literal["model", "stored"]

DEFAULT_HORIZON_QUARTERS = 16


def with_defaults(inputs: CascadeInputs) -> CascadeInputs:
    """Fill in default rate / economics / distribution rows for enabled dimensions."""
    cid = inputs.company_id
    regions = inputs.enabled_regions
    lead_types = inputs.enabled_lead_types

    rates = inputs.rate_map()
    economics = inputs.economics_map()
    dists = inputs.distribution_map()

    conversion_rates = list(inputs.conversion_rates)
    deal_economics = list(inputs.deal_economics)
    time_distributions = list(inputs.time_distributions)

    for r in regions:
        if r.id not in economics:
            deal_economics.append(default_deal_economics(cid, r.id))
        for t in lead_types:
            if (r.id, t.id) not in rates:
                conversion_rates.append(default_conversion_rate(cid, r.id, t.id))
    for t in lead_types:
        if t.id not in dists:
            time_distributions.append(default_time_distribution(cid, t.id))

    return replace(
        inputs,
        conversion_rates=conversion_rates,
        deal_economics=deal_economics,
        time_distributions=time_distributions,
    )


def recalculate(inputs: CascadeInputs, horizon_quarters: int = DEFAULT_HORIZON_QUARTERS) -> List[QuarterTotal]:
    region_ids = {r.id for r in inputs.enabled_regions}
    lead_type_ids = {t.id for t in inputs.enabled_lead_types}

    by_quarter: Dict[Period, List[HistoricalVolume]] = defaultdict(list)
    for h in inputs.history:
        if h.region_id in region_ids and h.lead_type_id in lead_type_ids:
            by_quarter[(h.year, h.quarter)].append(h)
    if not by_quarter:
        return []

    rates = inputs.rate_map()
    economics = inputs.economics_map()
    dists = inputs.distribution_map()
    warn_incomplete_distributions(dists)

    last = max(by_quarter)
    first_target = advance(last[0], last[1], 1)

    out: List[QuarterTotal] = []
    for target in horizon(first_target[0], first_target[1], horizon_quarters):
        total_opps = 0.0
        total_revenue = 0.0

        for source, rows in by_quarter.items():
            lag = quarters_between(source, target)
            if lag not in (0, 1, 2):
                continue

            for h in rows:
                rate = rates.get((h.region_id, h.lead_type_id))
                dist = dists.get(h.lead_type_id)
                if rate is None or dist is None:
                    continue

                pct = (dist.same_quarter_pct, dist.next_quarter_pct, dist.two_quarter_pct)[lag]
                if pct <= 0:
                    continue

                opps = h.volume * (rate.coverage_ratio / BP_SCALE) * (pct / BP_SCALE)
                total_opps += opps

                econ = economics.get(h.region_id)
                if econ is not None:
                    avg_win = (rate.win_rate_new + rate.win_rate_upsell) / 2 / BP_SCALE
                    avg_acv = (econ.acv_new + econ.acv_upsell) / 2
                    total_revenue += opps * avg_win * avg_acv

        out.append(
            QuarterTotal(
                year=target[0],
                quarter_num=target[1],
                revenue=round_half_up(total_revenue),
                opportunities=round_half_up(total_opps),
            )
        )
    return out


def aggregate_stored(rows: Sequence[ForecastRow]) -> List[QuarterTotal]:
    """Persisted forecast rows summed per quarter (revenue = new + upsell)."""
    totals: Dict[Tuple[int, int], QuarterTotal] = {}
    for f in rows:
        qt = totals.get((f.year, f.quarter))
        if qt is None:
            qt = totals[(f.year, f.quarter)] = QuarterTotal(year=f.year, quarter_num=f.quarter)
        qt.revenue += f.predicted_revenue_new + f.predicted_revenue_upsell
        qt.opportunities += round_half_up(f.predicted_opportunities / OPPORTUNITY_PRECISION_MULTIPLIER)
    return [totals[k] for k in sorted(totals)]


def calculate_what_if(
    inputs: CascadeInputs,
    adjustment: ScenarioAdjustment,
    baseline: BaselineMode = "model",
    stored_rows: Optional[Sequence[ForecastRow]] = None,
    horizon_quarters: int = DEFAULT_HORIZON_QUARTERS,
) -> WhatIfResult:
    """
    baseline="model":  unadjusted inputs through the same recalculator
    baseline="stored": persisted forecasts (``stored_rows``) aggregated by quarter
    """
    prepared = with_defaults(inputs)
    adjusted = recalculate(apply_adjustment(prepared, adjustment), horizon_quarters)

    if baseline == "stored":
        base = aggregate_stored(stored_rows or [])
    else:
        base = recalculate(prepared, horizon_quarters)

    return WhatIfResult(baseline=base, adjusted=adjusted, impact=compare(base, adjusted))


def run_what_if(
    store,
    company_id: int,
    adjustment: ScenarioAdjustment,
    baseline: BaselineMode = "model",
    horizon_quarters: int = DEFAULT_HORIZON_QUARTERS,
) -> WhatIfResult:
    inputs = load_inputs(store, company_id)
    stored = store.get_forecasts(company_id) if baseline == "stored" else None
    result = calculate_what_if(inputs, adjustment, baseline, stored, horizon_quarters)
    logger.info(
        "What-if for company %s (baseline=%s): revenue change %s",
        company_id,
        baseline,
        result.impact.total_revenue_change,
    )
    return result
