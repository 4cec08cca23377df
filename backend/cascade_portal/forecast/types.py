# backend/cascade_portal/forecast/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .constants import BP_SCALE
from .periods import quarter_key


# ---------- dimensions ----------
@dataclass(frozen=True)
class Region:
    id: int
    company_id: int
    name: str
    display_name: str
    enabled: bool = True


@dataclass(frozen=True)
class LeadType:
    id: int
    company_id: int
    name: str
    display_name: str
    enabled: bool = True


# ---------- inputs ----------
@dataclass(frozen=True)
class HistoricalVolume:
    company_id: int
    region_id: int
    lead_type_id: int
    year: int
    quarter: int
    volume: int


@dataclass(frozen=True)
class ConversionRate:
    company_id: int
    region_id: int
    lead_type_id: int
    coverage_ratio: int   # bp, lead -> opportunity
    win_rate_new: int     # bp
    win_rate_upsell: int  # bp


@dataclass(frozen=True)
class DealEconomics:
    company_id: int
    region_id: int
    acv_new: int     # cents
    acv_upsell: int  # cents


@dataclass(frozen=True)
class TimeDistribution:
    company_id: int
    lead_type_id: int
    same_quarter_pct: int
    next_quarter_pct: int
    two_quarter_pct: int

    @property
    def total(self) -> int:
        return self.same_quarter_pct + self.next_quarter_pct + self.two_quarter_pct

    @property
    def is_complete(self) -> bool:
        return self.total == BP_SCALE


# ---------- outputs ----------
@dataclass(frozen=True)
class CascadeResult:
    region: str
    lead_type: str
    year: int
    quarter: int
    sql_volume: int
    opportunities: int   # rounded for display
    revenue: int         # cents
    opportunities_exact: float = 0.0


@dataclass(frozen=True)
class ForecastRow:
    company_id: int
    region_id: int
    lead_type_id: int
    year: int
    quarter: int
    predicted_leads: int
    predicted_opportunities: int  # x100
    predicted_revenue_new: int     # cents
    predicted_revenue_upsell: int  # cents


@dataclass
class ScenarioAdjustment:
    """What-if deltas. ``None`` means "leave the baseline as is"."""

    conversion_rate_multiplier: Optional[int] = None  # 10000 = 1.0x
    acv_new_delta: Optional[int] = None                # cents
    acv_upsell_delta: Optional[int] = None             # cents
    same_quarter_delta: Optional[int] = None           # bp
    next_quarter_delta: Optional[int] = None           # bp
    two_quarter_delta: Optional[int] = None            # bp

    @property
    def touches_time_distribution(self) -> bool:
        return any(
            d is not None
            for d in (self.same_quarter_delta, self.next_quarter_delta, self.two_quarter_delta)
        )


# ---------- what-if ----------
@dataclass
class QuarterTotal:
    year: int
    quarter_num: int
    revenue: int = 0
    opportunities: int = 0

    @property
    def quarter(self) -> str:
        return quarter_key(self.year, self.quarter_num)


@dataclass(frozen=True)
class QuarterImpact:
    quarter: str
    revenue_change: int
    revenue_change_percent: float


@dataclass
class Impact:
    total_revenue_change: int
    total_revenue_change_percent: float
    total_opportunities_change: int
    total_opportunities_change_percent: float
    quarterly_impact: List[QuarterImpact] = field(default_factory=list)


@dataclass
class WhatIfResult:
    baseline: List[QuarterTotal]
    adjusted: List[QuarterTotal]
    impact: Impact


# ---------- named scenarios ----------
@dataclass
class ScenarioRecord:
    company_id: int
    name: str
    adjustment: ScenarioAdjustment
    total_revenue_change: int
    total_revenue_change_percent: int       # bp
    total_opportunities_change: int
    total_opportunities_change_percent: int  # bp
    description: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
