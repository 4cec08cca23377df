# backend/cascade_portal/api/forecasts.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from ..core.config import settings
from ..core.deps import get_company_locks, get_store
from ..forecast.errors import UnknownDimensionError
from ..forecast.runner import CompanyLocks, recalculate_company
from ..store.base import ForecastStore

router = APIRouter(prefix="/companies/{company_id}/forecasts", tags=["forecasts"])

# ---------------------------
# Pydantic Schemas
# ---------------------------

class ForecastOut(BaseModel):
    region_id: int
    lead_type_id: int
    year: int
    quarter: int
    predicted_leads: int
    predicted_opportunities: int   # x100
    predicted_revenue_new: int     # cents
    predicted_revenue_upsell: int  # cents

    class Config:
        from_attributes = True


class RecalculateOut(BaseModel):
    success: bool
    count: int
    message: str


# ---------------------------
# Endpoints
# ---------------------------

@router.get("", summary="List stored forecasts", response_model=List[ForecastOut])
def list_forecasts(company_id: int, store: ForecastStore = Depends(get_store)):
    return [ForecastOut.model_validate(f) for f in store.get_forecasts(company_id)]


@router.post("/calculate", summary="Recalculate and replace forecasts", response_model=RecalculateOut)
def calculate_forecasts(
    company_id: int,
    start_year: Optional[int] = Query(None, ge=1900, le=3000),
    start_quarter: Optional[int] = Query(None, ge=1, le=4),
    years: Optional[int] = Query(None, ge=1, le=20),
    store: ForecastStore = Depends(get_store),
    locks: CompanyLocks = Depends(get_company_locks),
):
    try:
        count = recalculate_company(
            store,
            company_id,
            start_year=start_year or settings.FORECAST_START_YEAR,
            start_quarter=start_quarter or settings.FORECAST_START_QUARTER,
            forecast_years=years or settings.FORECAST_YEARS,
            locks=locks,
            new_split_bp=settings.NEW_BUSINESS_SPLIT_BP,
            upsell_split_bp=settings.UPSELL_SPLIT_BP,
        )
    except UnknownDimensionError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return RecalculateOut(success=True, count=count, message=f"Generated {count} forecast entries")
