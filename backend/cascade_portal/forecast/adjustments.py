# backend/cascade_portal/forecast/adjustments.py
"""
Scenario adjustment applier.

Pure transform of baseline rates / economics / time distributions:
  * conversion_rate_multiplier scales coverage and both win rates (10000 = 1.0x)
  * ACV deltas are added as-is (negative results are not floored)
  * time-distribution deltas are added, the triple is renormalized to 10000,
    then each value is clamped to [0, 10000]

Clamping happens after renormalization, so a delta that drives a value below
zero leaves a triple that no longer sums to 10000. That is accepted (and logged).
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Sequence

from .cascade import CascadeInputs
from .constants import BP_SCALE
from .fixedpoint import clamp_bp, normalize_to_scale, scale_bp
from .types import ConversionRate, DealEconomics, ScenarioAdjustment, TimeDistribution

logger = logging.getLogger(__name__)


def adjust_conversion_rates(
    rates: Sequence[ConversionRate], adj: ScenarioAdjustment
) -> List[ConversionRate]:
    m = adj.conversion_rate_multiplier
    if m is None:
        return list(rates)
    return [
        replace(
            cr,
            coverage_ratio=scale_bp(cr.coverage_ratio, m),
            win_rate_new=scale_bp(cr.win_rate_new, m),
            win_rate_upsell=scale_bp(cr.win_rate_upsell, m),
        )
        for cr in rates
    ]


def adjust_deal_economics(
    economics: Sequence[DealEconomics], adj: ScenarioAdjustment
) -> List[DealEconomics]:
    out: List[DealEconomics] = []
    for de in economics:
        acv_new = de.acv_new if adj.acv_new_delta is None else de.acv_new + adj.acv_new_delta
        acv_upsell = (
            de.acv_upsell if adj.acv_upsell_delta is None else de.acv_upsell + adj.acv_upsell_delta
        )
        out.append(replace(de, acv_new=acv_new, acv_upsell=acv_upsell))
    return out


def adjust_time_distribution(td: TimeDistribution, adj: ScenarioAdjustment) -> TimeDistribution:
    values = [
        td.same_quarter_pct + (adj.same_quarter_delta or 0),
        td.next_quarter_pct + (adj.next_quarter_delta or 0),
        td.two_quarter_pct + (adj.two_quarter_delta or 0),
    ]

    total = sum(values)
    if total > 0 and total != BP_SCALE:
        values = normalize_to_scale(values)
    elif total <= 0:
        logger.warning(
            "Adjusted time distribution for lead type %s has total %s; skipping renormalization",
            td.lead_type_id,
            total,
        )

    same, nxt, two = (clamp_bp(v) for v in values)
    adjusted = replace(td, same_quarter_pct=same, next_quarter_pct=nxt, two_quarter_pct=two)
    if not adjusted.is_complete:
        logger.warning(
            "Adjusted time distribution for lead type %s sums to %s bp after clamping",
            td.lead_type_id,
            adjusted.total,
        )
    return adjusted


def adjust_time_distributions(
    dists: Sequence[TimeDistribution], adj: ScenarioAdjustment
) -> List[TimeDistribution]:
    if not adj.touches_time_distribution:
        return list(dists)
    return [adjust_time_distribution(td, adj) for td in dists]


def apply_adjustment(inputs: CascadeInputs, adj: ScenarioAdjustment) -> CascadeInputs:
    """Copy of ``inputs`` with rates, economics and distributions adjusted."""
    return replace(
        inputs,
        conversion_rates=adjust_conversion_rates(inputs.conversion_rates, adj),
        deal_economics=adjust_deal_economics(inputs.deal_economics, adj),
        time_distributions=adjust_time_distributions(inputs.time_distributions, adj),
    )
