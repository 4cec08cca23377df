# backend/cascade_portal/store/sql.py
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import List, Optional, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models as m
from ..forecast.types import (
    ConversionRate,
    DealEconomics,
    ForecastRow,
    HistoricalVolume,
    LeadType,
    Region,
    ScenarioAdjustment,
    ScenarioRecord,
    TimeDistribution,
)

logger = logging.getLogger(__name__)


def _scenario_out(row: m.Scenario) -> ScenarioRecord:
    return ScenarioRecord(
        id=row.id,
        company_id=row.company_id,
        name=row.name,
        description=row.description,
        adjustment=ScenarioAdjustment(
            conversion_rate_multiplier=row.conversion_rate_multiplier,
            acv_new_delta=row.acv_new_delta,
            acv_upsell_delta=row.acv_upsell_delta,
            same_quarter_delta=row.same_quarter_delta,
            next_quarter_delta=row.next_quarter_delta,
            two_quarter_delta=row.two_quarter_delta,
        ),
        total_revenue_change=row.total_revenue_change or 0,
        total_revenue_change_percent=row.total_revenue_change_percent or 0,
        total_opportunities_change=row.total_opportunities_change or 0,
        total_opportunities_change_percent=row.total_opportunities_change_percent or 0,
        created_at=row.created_at,
    )


class SqlForecastStore:
    """ForecastStore on top of a SQLAlchemy session (one per request)."""

    def __init__(self, db: Session):
        self.db = db

    def _all(self, model, company_id: int):
        q = select(model).where(model.company_id == company_id).order_by(model.id)
        return self.db.execute(q).scalars().all()

    # ---------------------------
    # Reads
    # ---------------------------
    def get_regions(self, company_id: int) -> List[Region]:
        return [
            Region(r.id, r.company_id, r.name, r.display_name, bool(r.enabled))
            for r in self._all(m.Region, company_id)
        ]

    def get_lead_types(self, company_id: int) -> List[LeadType]:
        return [
            LeadType(t.id, t.company_id, t.name, t.display_name, bool(t.enabled))
            for t in self._all(m.LeadType, company_id)
        ]

    def get_history(self, company_id: int) -> List[HistoricalVolume]:
        return [
            HistoricalVolume(h.company_id, h.region_id, h.lead_type_id, h.year, h.quarter, h.volume or 0)
            for h in self._all(m.HistoricalVolume, company_id)
        ]

    def get_conversion_rates(self, company_id: int) -> List[ConversionRate]:
        return [
            ConversionRate(
                cr.company_id, cr.region_id, cr.lead_type_id,
                cr.coverage_ratio, cr.win_rate_new, cr.win_rate_upsell,
            )
            for cr in self._all(m.ConversionRate, company_id)
        ]

    def get_deal_economics(self, company_id: int) -> List[DealEconomics]:
        return [
            DealEconomics(de.company_id, de.region_id, de.acv_new, de.acv_upsell)
            for de in self._all(m.DealEconomics, company_id)
        ]

    def get_time_distributions(self, company_id: int) -> List[TimeDistribution]:
        return [
            TimeDistribution(
                td.company_id, td.lead_type_id,
                td.same_quarter_pct, td.next_quarter_pct, td.two_quarter_pct,
            )
            for td in self._all(m.TimeDistribution, company_id)
        ]

    # ---------------------------
    # Forecasts
    # ---------------------------
    def get_forecasts(self, company_id: int) -> List[ForecastRow]:
        q = (
            select(m.Forecast)
            .where(m.Forecast.company_id == company_id)
            .order_by(m.Forecast.year, m.Forecast.quarter, m.Forecast.region_id, m.Forecast.lead_type_id)
        )
        return [
            ForecastRow(
                company_id=f.company_id,
                region_id=f.region_id,
                lead_type_id=f.lead_type_id,
                year=f.year,
                quarter=f.quarter,
                predicted_leads=f.predicted_leads,
                predicted_opportunities=f.predicted_opportunities,
                predicted_revenue_new=f.predicted_revenue_new,
                predicted_revenue_upsell=f.predicted_revenue_upsell,
            )
            for f in self.db.execute(q).scalars().all()
        ]

    def replace_forecasts(self, company_id: int, rows: Sequence[ForecastRow]) -> int:
        # delete + insert in one transaction: readers never see an empty company
        by_key = {(f.region_id, f.lead_type_id, f.year, f.quarter): asdict(f) for f in rows}
        try:
            self.db.execute(delete(m.Forecast).where(m.Forecast.company_id == company_id))
            if by_key:
                self.db.execute(insert(m.Forecast), list(by_key.values()))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Forecast replace failed for company %s", company_id)
            raise
        return len(by_key)

    # ---------------------------
    # Scenarios
    # ---------------------------
    def create_scenario(self, record: ScenarioRecord) -> ScenarioRecord:
        adj = record.adjustment
        row = m.Scenario(
            company_id=record.company_id,
            name=record.name,
            description=record.description,
            conversion_rate_multiplier=adj.conversion_rate_multiplier,
            acv_new_delta=adj.acv_new_delta,
            acv_upsell_delta=adj.acv_upsell_delta,
            same_quarter_delta=adj.same_quarter_delta,
            next_quarter_delta=adj.next_quarter_delta,
            two_quarter_delta=adj.two_quarter_delta,
            total_revenue_change=record.total_revenue_change,
            total_revenue_change_percent=record.total_revenue_change_percent,
            total_opportunities_change=record.total_opportunities_change,
            total_opportunities_change_percent=record.total_opportunities_change_percent,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return _scenario_out(row)

    def list_scenarios(self, company_id: int) -> List[ScenarioRecord]:
        q = select(m.Scenario).where(m.Scenario.company_id == company_id).order_by(m.Scenario.id.desc())
        return [_scenario_out(s) for s in self.db.execute(q).scalars().all()]

    def get_scenario(self, scenario_id: int) -> Optional[ScenarioRecord]:
        row = self.db.get(m.Scenario, scenario_id)
        return _scenario_out(row) if row else None

    def update_scenario(
        self, scenario_id: int, name: Optional[str] = None, description: Optional[str] = None
    ) -> Optional[ScenarioRecord]:
        row = self.db.get(m.Scenario, scenario_id)
        if not row:
            return None
        if name is not None:
            row.name = name
        if description is not None:
            row.description = description
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return _scenario_out(row)

    def delete_scenario(self, scenario_id: int) -> bool:
        row = self.db.get(m.Scenario, scenario_id)
        if not row:
            return False
        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return True
