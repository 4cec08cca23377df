# backend/cascade_portal/api/scenarios.py
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field, validator

from ..core.config import settings
from ..core.deps import get_store
from ..forecast.fixedpoint import percent_to_bp
from ..forecast.types import ScenarioRecord
from ..forecast.whatif import run_what_if
from ..store.base import ForecastStore
from .whatif import AdjustmentIn

router = APIRouter(tags=["scenarios"])

# ---------------------------
# Pydantic Schemas
# ---------------------------

class ScenarioCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    adjustments: AdjustmentIn = Field(default_factory=AdjustmentIn)
    baseline: Literal["model", "stored"] = "model"

    @validator("name")
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class ScenarioUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)

    @validator("name")
    def _strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class ScenarioOut(BaseModel):
    id: int
    company_id: int
    name: str
    description: Optional[str] = None

    conversion_rate_multiplier: Optional[int] = None
    acv_new_delta: Optional[int] = None
    acv_upsell_delta: Optional[int] = None
    same_quarter_delta: Optional[int] = None
    next_quarter_delta: Optional[int] = None
    two_quarter_delta: Optional[int] = None

    total_revenue_change: int
    total_revenue_change_percent: int         # bp
    total_opportunities_change: int
    total_opportunities_change_percent: int   # bp

    created_at: Optional[datetime] = None


# ---------------------------
# Helpers
# ---------------------------

def _serialize(rec: ScenarioRecord) -> ScenarioOut:
    adj = rec.adjustment
    return ScenarioOut(
        id=rec.id,
        company_id=rec.company_id,
        name=rec.name,
        description=rec.description,
        conversion_rate_multiplier=adj.conversion_rate_multiplier,
        acv_new_delta=adj.acv_new_delta,
        acv_upsell_delta=adj.acv_upsell_delta,
        same_quarter_delta=adj.same_quarter_delta,
        next_quarter_delta=adj.next_quarter_delta,
        two_quarter_delta=adj.two_quarter_delta,
        total_revenue_change=rec.total_revenue_change,
        total_revenue_change_percent=rec.total_revenue_change_percent,
        total_opportunities_change=rec.total_opportunities_change,
        total_opportunities_change_percent=rec.total_opportunities_change_percent,
        created_at=rec.created_at,
    )


def _get_or_404(store: ForecastStore, scenario_id: int) -> ScenarioRecord:
    rec = store.get_scenario(scenario_id)
    if not rec:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return rec


# ---------------------------
# Endpoints
# ---------------------------

@router.post(
    "/companies/{company_id}/scenarios",
    summary="Save a named what-if scenario",
    response_model=ScenarioOut,
    status_code=status.HTTP_201_CREATED,
)
def create_scenario(company_id: int, body: ScenarioCreate, store: ForecastStore = Depends(get_store)):
    adjustment = body.adjustments.to_adjustment()
    impact = run_what_if(
        store,
        company_id,
        adjustment,
        baseline=body.baseline,
        horizon_quarters=settings.WHATIF_HORIZON_QUARTERS,
    ).impact

    rec = store.create_scenario(
        ScenarioRecord(
            company_id=company_id,
            name=body.name,
            description=body.description,
            adjustment=adjustment,
            total_revenue_change=impact.total_revenue_change,
            total_revenue_change_percent=percent_to_bp(impact.total_revenue_change_percent),
            total_opportunities_change=impact.total_opportunities_change,
            total_opportunities_change_percent=percent_to_bp(impact.total_opportunities_change_percent),
        )
    )
    return _serialize(rec)


@router.get("/companies/{company_id}/scenarios", summary="List saved scenarios", response_model=List[ScenarioOut])
def list_scenarios(company_id: int, store: ForecastStore = Depends(get_store)):
    return [_serialize(s) for s in store.list_scenarios(company_id)]


@router.get("/scenarios/{scenario_id}", summary="Get a saved scenario", response_model=ScenarioOut)
def get_scenario(scenario_id: int, store: ForecastStore = Depends(get_store)):
    return _serialize(_get_or_404(store, scenario_id))


@router.patch("/scenarios/{scenario_id}", summary="Rename or re-describe a saved scenario", response_model=ScenarioOut)
def update_scenario(scenario_id: int, body: ScenarioUpdate, store: ForecastStore = Depends(get_store)):
    _get_or_404(store, scenario_id)
    return _serialize(store.update_scenario(scenario_id, name=body.name, description=body.description))


@router.delete("/scenarios/{scenario_id}", summary="Delete a saved scenario", status_code=status.HTTP_204_NO_CONTENT)
def delete_scenario(scenario_id: int, store: ForecastStore = Depends(get_store)):
    _get_or_404(store, scenario_id)
    store.delete_scenario(scenario_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
