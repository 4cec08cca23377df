# backend/tests/test_cascade.py
import logging

import pytest

from cascade_portal.forecast.adjustments import apply_adjustment
from cascade_portal.forecast.cascade import calculate_cascade, load_inputs
from cascade_portal.forecast.types import HistoricalVolume, ScenarioAdjustment, TimeDistribution

from conftest import COMPANY_ID, seed_single_cell


def _run(store, start=(2024, 1), years=1):
    return calculate_cascade(load_inputs(store, COMPANY_ID), start[0], start[1], years)


# -----------------------------
# End-to-end single cell
# -----------------------------
def test_single_cell_lag_window(store, single_cell):
    results = _run(store)
    assert [(r.year, r.quarter) for r in results] == [(2024, 1), (2024, 2), (2024, 3), (2024, 4)]

    q1, q2, q3, q4 = results
    # 100 * 5% * 89% = 4.45
    assert q1.sql_volume == 100
    assert q1.opportunities == 4
    assert q1.opportunities_exact == pytest.approx(4.45)
    # revenue from unrounded opportunities: 4.45 * 25% * 5,000,000
    assert q1.revenue == 5_562_500

    # 100 * 5% * 10% = 0.5 -> rounds half up
    assert q2.sql_volume == 0
    assert q2.opportunities == 1
    assert q2.revenue == 625_000

    # 100 * 5% * 1% = 0.05
    assert q3.opportunities == 0
    assert q3.revenue == 62_500

    assert q4.opportunities == 0 and q4.revenue == 0
    assert all(r.region == "NORAM" and r.lead_type == "Inbound" for r in results)


def test_recompute_is_idempotent(store, single_cell):
    assert _run(store, years=2) == _run(store, years=2)


def test_zero_coverage_means_zero_everything(store):
    seed_single_cell(store, volume=5000, coverage=0)
    results = _run(store, years=2)
    assert all(r.opportunities == 0 and r.revenue == 0 for r in results)
    assert results[0].sql_volume == 5000


def test_defaults_when_rows_missing(store):
    region = store.add_region(COMPANY_ID, "EMEA")
    lead_type = store.add_lead_type(COMPANY_ID, "Outbound")
    store.upsert_history(HistoricalVolume(COMPANY_ID, region.id, lead_type.id, 2024, 1, 100))

    q1 = _run(store)[0]
    # 500 bp coverage, 8900 bp same quarter, 2500 bp win rate, $100,000 ACV
    assert q1.opportunities_exact == pytest.approx(4.45)
    assert q1.revenue == 11_125_000


def test_contributions_from_previous_quarters(store):
    region, lead_type = seed_single_cell(store)
    store.upsert_history(HistoricalVolume(COMPANY_ID, region.id, lead_type.id, 2024, 2, 200))

    q2 = _run(store)[1]
    # 200 * 5% * 89% + 100 * 5% * 10%
    assert q2.opportunities_exact == pytest.approx(9.4)
    assert q2.opportunities == 9


def test_no_lookback_before_start(store):
    seed_single_cell(store, volume=1000, period=(2023, 4))
    results = _run(store, start=(2024, 1))
    assert all(r.opportunities_exact == 0 for r in results)


def test_disabled_dimensions_are_skipped(store, single_cell):
    store.add_region(COMPANY_ID, "APAC", enabled=False)
    store.add_lead_type(COMPANY_ID, "Partner", enabled=False)
    results = _run(store)
    assert {r.region for r in results} == {"NORAM"}
    assert {r.lead_type for r in results} == {"Inbound"}


def test_horizon_size(store, single_cell):
    store.add_region(COMPANY_ID, "EMEA")
    results = _run(store, start=(2024, 3), years=2)
    assert len(results) == 2 * 1 * 8
    assert (results[-1].year, results[-1].quarter) == (2026, 2)


def test_other_companies_are_ignored(store, single_cell):
    seed_single_cell(store, company_id=2, volume=999)
    assert _run(store)[0].sql_volume == 100


def test_multiplier_doubles_coverage_and_opportunities(store, single_cell):
    inputs = load_inputs(store, COMPANY_ID)
    adjusted = apply_adjustment(inputs, ScenarioAdjustment(conversion_rate_multiplier=20000))
    assert adjusted.conversion_rates[0].coverage_ratio == 1000

    base = calculate_cascade(inputs, 2024, 1, 1)
    doubled = calculate_cascade(adjusted, 2024, 1, 1)
    assert doubled[0].opportunities_exact == pytest.approx(2 * base[0].opportunities_exact)
    assert doubled[0].opportunities == 9
    assert doubled[0].revenue > 2 * base[0].revenue


def test_incomplete_distribution_is_logged(store, caplog):
    _, lead_type = seed_single_cell(store)
    store.upsert_time_distribution(TimeDistribution(COMPANY_ID, lead_type.id, 5000, 1000, 100))
    with caplog.at_level(logging.WARNING, logger="cascade_portal.forecast.cascade"):
        _run(store)
    assert "sums to 6100" in caplog.text
