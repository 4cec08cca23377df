# backend/cascade_portal/api/whatif.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ..core.config import settings
from ..core.deps import get_store
from ..forecast.types import ScenarioAdjustment
from ..forecast.whatif import run_what_if
from ..store.base import ForecastStore

router = APIRouter(prefix="/companies/{company_id}/whatif", tags=["whatif"])

# ---------------------------
# Pydantic Schemas
# ---------------------------

class AdjustmentIn(BaseModel):
    conversion_rate_multiplier: Optional[int] = Field(None, ge=0, description="10000 = 1.0x")
    acv_new_delta: Optional[int] = Field(None, description="cents, may be negative")
    acv_upsell_delta: Optional[int] = Field(None, description="cents, may be negative")
    same_quarter_delta: Optional[int] = Field(None, ge=-10000, le=10000, description="bp")
    next_quarter_delta: Optional[int] = Field(None, ge=-10000, le=10000, description="bp")
    two_quarter_delta: Optional[int] = Field(None, ge=-10000, le=10000, description="bp")

    def to_adjustment(self) -> ScenarioAdjustment:
        return ScenarioAdjustment(**self.model_dump())


class QuarterTotalOut(BaseModel):
    quarter: str
    year: int
    quarter_num: int
    revenue: int
    opportunities: int

    class Config:
        from_attributes = True


class QuarterImpactOut(BaseModel):
    quarter: str
    revenue_change: int
    revenue_change_percent: float

    class Config:
        from_attributes = True


class ImpactOut(BaseModel):
    total_revenue_change: int
    total_revenue_change_percent: float
    total_opportunities_change: int
    total_opportunities_change_percent: float
    quarterly_impact: List[QuarterImpactOut]

    class Config:
        from_attributes = True


class WhatIfOut(BaseModel):
    baseline: List[QuarterTotalOut]
    adjusted: List[QuarterTotalOut]
    impact: ImpactOut

    class Config:
        from_attributes = True


# ---------------------------
# Endpoints
# ---------------------------

@router.post("", summary="Run a what-if calculation", response_model=WhatIfOut)
def calculate_what_if(
    company_id: int,
    body: AdjustmentIn,
    baseline: Literal["model", "stored"] = Query("model"),
    store: ForecastStore = Depends(get_store),
):
    """
    baseline=model  → baseline recomputed with the same what-if model (default)
    baseline=stored → baseline taken from persisted forecasts
    """
    result = run_what_if(
        store,
        company_id,
        body.to_adjustment(),
        baseline=baseline,
        horizon_quarters=settings.WHATIF_HORIZON_QUARTERS,
    )
    return WhatIfOut.model_validate(result)
