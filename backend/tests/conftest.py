# backend/tests/conftest.py
import pytest

from cascade_portal.forecast.types import (
    ConversionRate,
    DealEconomics,
    HistoricalVolume,
    TimeDistribution,
)
from cascade_portal.store.memory import MemoryForecastStore

COMPANY_ID = 1


def seed_single_cell(
    store: MemoryForecastStore,
    company_id: int = COMPANY_ID,
    volume: int = 100,
    coverage: int = 500,
    win_new: int = 2500,
    win_upsell: int = 2500,
    acv_new: int = 5_000_000,
    acv_upsell: int = 5_000_000,
    dist=(8900, 1000, 100),
    period=(2024, 1),
):
    """One region, one lead type, ``volume`` leads in ``period`` and nothing elsewhere."""
    region = store.add_region(company_id, "NORAM", "North America")
    lead_type = store.add_lead_type(company_id, "Inbound")
    store.upsert_history(
        HistoricalVolume(company_id, region.id, lead_type.id, period[0], period[1], volume)
    )
    store.upsert_conversion_rate(
        ConversionRate(company_id, region.id, lead_type.id, coverage, win_new, win_upsell)
    )
    store.upsert_deal_economics(DealEconomics(company_id, region.id, acv_new, acv_upsell))
    store.upsert_time_distribution(TimeDistribution(company_id, lead_type.id, *dist))
    return region, lead_type


@pytest.fixture
def store():
    return MemoryForecastStore()


@pytest.fixture
def single_cell(store):
    return seed_single_cell(store)
