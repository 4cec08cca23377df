# backend/tests/test_impact.py
import pytest

from cascade_portal.forecast.impact import compare
from cascade_portal.forecast.types import QuarterTotal


def qt(year, q, revenue, opportunities=0):
    return QuarterTotal(year=year, quarter_num=q, revenue=revenue, opportunities=opportunities)


def test_totals_and_quarterly_changes():
    baseline = [qt(2025, 1, 1000, 10), qt(2025, 2, 2000, 20)]
    adjusted = [qt(2025, 1, 1500, 12), qt(2025, 2, 1000, 20)]
    impact = compare(baseline, adjusted)

    assert impact.total_revenue_change == -500
    assert impact.total_revenue_change_percent == pytest.approx(-500 / 3000 * 100)
    assert impact.total_opportunities_change == 2
    assert impact.total_opportunities_change_percent == pytest.approx(2 / 30 * 100)

    q1, q2 = impact.quarterly_impact
    assert (q1.quarter, q1.revenue_change, q1.revenue_change_percent) == ("2025-Q1", 500, 50.0)
    assert (q2.quarter, q2.revenue_change, q2.revenue_change_percent) == ("2025-Q2", -1000, -50.0)


def test_zero_baseline_reports_zero_percent():
    impact = compare([qt(2025, 1, 0, 0)], [qt(2025, 1, 700, 3)])
    assert impact.total_revenue_change == 700
    assert impact.total_revenue_change_percent == 0.0
    assert impact.total_opportunities_change_percent == 0.0
    assert impact.quarterly_impact[0].revenue_change_percent == 0.0


def test_missing_baseline_quarter_counts_as_zero():
    impact = compare([qt(2025, 1, 1000, 1)], [qt(2025, 1, 1000, 1), qt(2025, 2, 400, 1)])
    assert impact.total_revenue_change == 400
    assert impact.total_revenue_change_percent == pytest.approx(40.0)
    assert impact.quarterly_impact[1].revenue_change == 400
    assert impact.quarterly_impact[1].revenue_change_percent == 0.0


def test_baseline_only_quarters_are_ignored():
    impact = compare([qt(2024, 4, 9999, 9), qt(2025, 1, 100, 1)], [qt(2025, 1, 100, 1)])
    assert impact.total_revenue_change == 0
    assert [qi.quarter for qi in impact.quarterly_impact] == ["2025-Q1"]


def test_empty_inputs():
    impact = compare([], [])
    assert impact.total_revenue_change == 0
    assert impact.quarterly_impact == []
