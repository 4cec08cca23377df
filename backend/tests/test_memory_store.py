# backend/tests/test_memory_store.py
import threading
from datetime import timezone

from cascade_portal.forecast.types import ScenarioAdjustment, ScenarioRecord
from cascade_portal.store.memory import MemoryForecastStore

from conftest import COMPANY_ID


def _record(name="Flat", company_id=COMPANY_ID, description=None):
    return ScenarioRecord(company_id, name, ScenarioAdjustment(), 0, 0, 0, 0, description=description)


def test_created_at_is_timezone_aware(store):
    saved = store.create_scenario(_record())
    assert saved.created_at.tzinfo is timezone.utc


def test_update_scenario(store):
    saved = store.create_scenario(_record(description="old"))

    renamed = store.update_scenario(saved.id, name="Renamed")
    assert (renamed.name, renamed.description) == ("Renamed", "old")

    described = store.update_scenario(saved.id, description="new")
    assert (described.name, described.description) == ("Renamed", "new")
    assert store.get_scenario(saved.id) == described
    assert described.created_at == saved.created_at

    assert store.update_scenario(9999, name="x") is None


def test_reads_while_another_thread_writes():
    store = MemoryForecastStore()
    for i in range(20_000):
        store.create_scenario(_record(name=f"s{i}"))
    for i in range(200):
        store.add_region(COMPANY_ID, f"R{i}")

    stop = threading.Event()
    errors = []

    def churn():
        try:
            while not stop.is_set():
                rec = store.create_scenario(_record(name="tmp"))
                store.add_region(COMPANY_ID + 1, f"tmp{rec.id}")
                store.delete_scenario(rec.id)
        except Exception as e:  # surfaced below
            errors.append(repr(e))

    writer = threading.Thread(target=churn)
    writer.start()
    try:
        for _ in range(300):
            try:
                store.list_scenarios(COMPANY_ID)
                store.get_regions(COMPANY_ID)
            except RuntimeError as e:
                errors.append(repr(e))
                break
    finally:
        stop.set()
        writer.join()

    assert errors == []
    assert len(store.list_scenarios(COMPANY_ID)) == 20_000
    assert len(store.get_regions(COMPANY_ID)) == 200
