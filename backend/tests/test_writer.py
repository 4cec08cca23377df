# backend/tests/test_writer.py
import threading

import pytest

from cascade_portal.forecast.cascade import calculate_cascade, load_inputs
from cascade_portal.forecast.errors import UnknownDimensionError
from cascade_portal.forecast.runner import CompanyLocks, recalculate_company
from cascade_portal.forecast.types import CascadeResult
from cascade_portal.forecast.writer import ForecastStoreWriter, build_forecast_rows

from conftest import COMPANY_ID


def test_recalculate_persists_split_rows(store, single_cell):
    region, lead_type = single_cell
    count = recalculate_company(store, COMPANY_ID, 2024, 1, 1)
    assert count == 4

    rows = store.get_forecasts(COMPANY_ID)
    assert len(rows) == 4
    q1, q2, q3, q4 = rows
    assert (q1.region_id, q1.lead_type_id) == (region.id, lead_type.id)
    assert q1.predicted_leads == 100
    assert q1.predicted_opportunities == 445  # 4.45 x100
    assert q1.predicted_revenue_new == 3_893_750
    assert q1.predicted_revenue_upsell == 1_668_750

    assert q2.predicted_opportunities == 50
    assert (q2.predicted_revenue_new, q2.predicted_revenue_upsell) == (437_500, 187_500)
    assert q3.predicted_opportunities == 5
    assert (q3.predicted_revenue_new, q3.predicted_revenue_upsell) == (43_750, 18_750)
    assert q4.predicted_opportunities == 0


def test_second_save_replaces_the_first(store, single_cell):
    recalculate_company(store, COMPANY_ID, 2024, 1, 2)
    assert len(store.get_forecasts(COMPANY_ID)) == 8

    recalculate_company(store, COMPANY_ID, 2025, 1, 1)
    rows = store.get_forecasts(COMPANY_ID)
    assert len(rows) == 4
    assert {r.year for r in rows} == {2025}


def test_recalculate_twice_gives_identical_rows(store, single_cell):
    locks = CompanyLocks()
    recalculate_company(store, COMPANY_ID, locks=locks)
    first = store.get_forecasts(COMPANY_ID)
    recalculate_company(store, COMPANY_ID, locks=locks)
    assert store.get_forecasts(COMPANY_ID) == first
    assert len(first) == 5 * 4


def test_unknown_region_writes_nothing(store, single_cell):
    recalculate_company(store, COMPANY_ID, 2024, 1, 1)
    before = store.get_forecasts(COMPANY_ID)

    bogus = [
        CascadeResult("NORAM", "Inbound", 2024, 1, 10, 1, 100),
        CascadeResult("ATLANTIS", "Inbound", 2024, 2, 10, 1, 100),
    ]
    with pytest.raises(UnknownDimensionError) as exc:
        ForecastStoreWriter(store).save(COMPANY_ID, bogus)

    assert exc.value.missing == [("ATLANTIS", "Inbound")]
    assert "ATLANTIS" in str(exc.value)
    assert store.get_forecasts(COMPANY_ID) == before


def test_disabled_dimensions_still_resolve(store, single_cell):
    store.add_region(COMPANY_ID, "APAC", enabled=False)
    rows = build_forecast_rows(
        COMPANY_ID,
        [CascadeResult("APAC", "Inbound", 2024, 1, 0, 0, 0)],
        {"APAC": 7},
        {"Inbound": 2},
    )
    assert rows[0].region_id == 7
    # writer resolves against every region, not only enabled ones
    results = calculate_cascade(load_inputs(store, COMPANY_ID), 2024, 1, 1)
    results.append(CascadeResult("APAC", "Inbound", 2024, 1, 0, 0, 0))
    assert ForecastStoreWriter(store).save(COMPANY_ID, results) == 5


def test_custom_split_and_integer_opportunities():
    rows = build_forecast_rows(
        COMPANY_ID,
        [CascadeResult("NORAM", "Inbound", 2024, 1, 50, 3, 1_000_001)],
        {"NORAM": 1},
        {"Inbound": 2},
        new_split_bp=6000,
        upsell_split_bp=4000,
    )
    row = rows[0]
    # no exact value: falls back to the rounded count
    assert row.predicted_opportunities == 300
    assert row.predicted_revenue_new == 600_001  # 600000.6 rounds up
    assert row.predicted_revenue_upsell == 400_000


def test_writer_derives_upsell_split(store):
    writer = ForecastStoreWriter(store, new_split_bp=8000)
    assert writer.upsell_split_bp == 2000


def test_company_locks_are_shared_per_registry():
    locks = CompanyLocks()
    assert locks.get(COMPANY_ID) is locks.get(COMPANY_ID)
    assert locks.get(COMPANY_ID) is not locks.get(COMPANY_ID + 1)
    # a second registry does not serialize against the first
    assert CompanyLocks().get(COMPANY_ID) is not locks.get(COMPANY_ID)


def test_recalculate_waits_for_the_company_lock(store, single_cell):
    locks = CompanyLocks()
    done = threading.Event()

    def run():
        recalculate_company(store, COMPANY_ID, 2024, 1, 1, locks=locks)
        done.set()

    with locks.hold(COMPANY_ID):
        t = threading.Thread(target=run)
        t.start()
        assert not done.wait(0.2)
        assert store.get_forecasts(COMPANY_ID) == []
    t.join()
    assert done.is_set()
    assert len(store.get_forecasts(COMPANY_ID)) == 4
