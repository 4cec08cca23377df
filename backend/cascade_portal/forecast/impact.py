# backend/cascade_portal/forecast/impact.py
from __future__ import annotations

from typing import Dict, List, Sequence

from .fixedpoint import percent_change
from .types import Impact, QuarterImpact, QuarterTotal


def compare(baseline: Sequence[QuarterTotal], adjusted: Sequence[QuarterTotal]) -> Impact:
    """
    Diff adjusted against baseline, aligned on the quarter key.

    Quarters are driven by ``adjusted``: a baseline quarter with no adjusted
    counterpart is not counted in the totals. Percentages are 0.0 whenever the
    baseline value is 0.
    """
    by_key: Dict[str, QuarterTotal] = {b.quarter: b for b in baseline}

    base_rev = adj_rev = 0
    base_opps = adj_opps = 0
    quarterly: List[QuarterImpact] = []

    for adj in adjusted:
        base = by_key.get(adj.quarter)
        base_revenue = base.revenue if base else 0
        if base:
            base_rev += base.revenue
            base_opps += base.opportunities
        adj_rev += adj.revenue
        adj_opps += adj.opportunities

        change = adj.revenue - base_revenue
        quarterly.append(
            QuarterImpact(
                quarter=adj.quarter,
                revenue_change=change,
                revenue_change_percent=percent_change(change, base_revenue),
            )
        )

    return Impact(
        total_revenue_change=adj_rev - base_rev,
        total_revenue_change_percent=percent_change(adj_rev - base_rev, base_rev),
        total_opportunities_change=adj_opps - base_opps,
        total_opportunities_change_percent=percent_change(adj_opps - base_opps, base_opps),
        quarterly_impact=quarterly,
    )
