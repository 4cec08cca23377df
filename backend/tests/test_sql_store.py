# backend/tests/test_sql_store.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cascade_portal import models as m
from cascade_portal.forecast.errors import UnknownDimensionError
from cascade_portal.forecast.runner import recalculate_company
from cascade_portal.forecast.types import CascadeResult, ScenarioAdjustment, ScenarioRecord
from cascade_portal.forecast.whatif import run_what_if
from cascade_portal.forecast.writer import ForecastStoreWriter
from cascade_portal.store.sql import SqlForecastStore


# -----------------------------
# Test DB: ayrı bir SQLite dosyası
# -----------------------------
@pytest.fixture
def db(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'cascade_test.db'}", connect_args={"check_same_thread": False})
    m.Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def company(db):
    c = m.Company(name="Acme")
    db.add(c)
    db.flush()

    region = m.Region(company_id=c.id, name="NORAM", display_name="North America")
    apac = m.Region(company_id=c.id, name="APAC", display_name="Asia Pacific", enabled=False)
    lead_type = m.LeadType(company_id=c.id, name="Inbound", display_name="Inbound")
    db.add_all([region, apac, lead_type])
    db.flush()

    db.add_all([
        m.HistoricalVolume(company_id=c.id, region_id=region.id, lead_type_id=lead_type.id,
                           year=2024, quarter=1, volume=100),
        m.ConversionRate(company_id=c.id, region_id=region.id, lead_type_id=lead_type.id,
                         coverage_ratio=500, win_rate_new=2500, win_rate_upsell=2500),
        m.DealEconomics(company_id=c.id, region_id=region.id, acv_new=5_000_000, acv_upsell=5_000_000),
        m.TimeDistribution(company_id=c.id, lead_type_id=lead_type.id,
                           same_quarter_pct=8900, next_quarter_pct=1000, two_quarter_pct=100),
    ])
    db.commit()
    return c


def test_reads_map_to_records(db, company):
    store = SqlForecastStore(db)
    regions = store.get_regions(company.id)
    assert [(r.name, r.enabled) for r in regions] == [("NORAM", True), ("APAC", False)]
    assert [t.name for t in store.get_lead_types(company.id)] == ["Inbound"]
    assert store.get_history(company.id)[0].volume == 100
    assert store.get_conversion_rates(company.id)[0].coverage_ratio == 500
    assert store.get_deal_economics(company.id)[0].acv_upsell == 5_000_000
    assert store.get_time_distributions(company.id)[0].total == 10000
    assert store.get_regions(company.id + 1) == []


def test_recalculate_replaces_rows(db, company):
    store = SqlForecastStore(db)
    assert recalculate_company(store, company.id, 2024, 1, 2) == 8
    assert db.query(m.Forecast).count() == 8

    assert recalculate_company(store, company.id, 2024, 1, 1) == 4
    rows = store.get_forecasts(company.id)
    assert len(rows) == 4
    assert rows[0].predicted_opportunities == 445
    assert rows[0].predicted_revenue_new == 3_893_750
    assert rows[0].predicted_revenue_upsell == 1_668_750


def test_failed_save_keeps_previous_rows(db, company):
    store = SqlForecastStore(db)
    recalculate_company(store, company.id, 2024, 1, 1)

    with pytest.raises(UnknownDimensionError):
        ForecastStoreWriter(store).save(company.id, [CascadeResult("LATAM", "Inbound", 2024, 1, 1, 1, 1)])
    assert len(store.get_forecasts(company.id)) == 4


def test_scenario_crud(db, company):
    store = SqlForecastStore(db)
    adj = ScenarioAdjustment(conversion_rate_multiplier=20000, acv_new_delta=-100)
    impact = run_what_if(store, company.id, adj).impact

    saved = store.create_scenario(
        ScenarioRecord(
            company_id=company.id,
            name="Double coverage",
            adjustment=adj,
            total_revenue_change=impact.total_revenue_change,
            total_revenue_change_percent=0,
            total_opportunities_change=impact.total_opportunities_change,
            total_opportunities_change_percent=0,
        )
    )
    assert saved.id is not None
    assert saved.created_at is not None
    assert saved.adjustment == adj
    assert saved.adjustment.same_quarter_delta is None

    second = store.create_scenario(
        ScenarioRecord(company.id, "Flat", ScenarioAdjustment(), 0, 0, 0, 0)
    )
    assert [s.name for s in store.list_scenarios(company.id)] == ["Flat", "Double coverage"]
    assert store.get_scenario(saved.id).total_revenue_change == impact.total_revenue_change

    assert store.delete_scenario(second.id) is True
    assert store.delete_scenario(second.id) is False
    assert store.get_scenario(second.id) is None


def test_scenario_update(db, company):
    store = SqlForecastStore(db)
    saved = store.create_scenario(
        ScenarioRecord(company.id, "Draft", ScenarioAdjustment(acv_new_delta=500), 0, 0, 0, 0, description="v1")
    )

    renamed = store.update_scenario(saved.id, name="Final")
    assert (renamed.name, renamed.description) == ("Final", "v1")
    assert renamed.adjustment.acv_new_delta == 500

    described = store.update_scenario(saved.id, description="v2")
    assert (described.name, described.description) == ("Final", "v2")
    assert store.get_scenario(saved.id).description == "v2"

    assert store.update_scenario(saved.id + 100, name="ghost") is None
