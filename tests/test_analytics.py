import json

import pytest

from ostrich_canvas import analytics
from ostrich_canvas import state as transitions
from ostrich_canvas.data import AB_TEST_DATA, SALES_DATA, WHAT_IF_DATA
from ostrich_canvas.filter_engine import make_filter
from ostrich_canvas.models import ABTestResult


def test_pivot_normalizes_and_totals():
    pivot = analytics.pivot_revenue(SALES_DATA)
    assert pivot["headers"] == ["Product", "East", "North", "South", "West", "Total"]

    rows = {r["Product"]: r for r in pivot["rows"]}
    assert list(rows) == ["Gadget X", "Gizmo Z", "Widget Y", "Grand Total"]
    assert rows["Gadget X"] == {"Product": "Gadget X", "East": 21000, "North": 48000,
                                "South": 0, "West": 20000, "Total": 89000}
    assert rows["Gizmo Z"]["East"] == 54500
    assert rows["Widget Y"]["Total"] == 64500
    assert rows["Grand Total"]["Total"] == 228000
    assert rows["Grand Total"]["South"] == 54000


def test_pivot_empty():
    assert analytics.pivot_revenue([]) == {"headers": [], "rows": []}


def test_revenue_by_region_sorted_descending():
    assert analytics.revenue_by_region(SALES_DATA) == [
        {"region": "East", "revenue": 75500},
        {"region": "North", "revenue": 68000},
        {"region": "South", "revenue": 54000},
        {"region": "West", "revenue": 30500},
    ]


def test_chart_versions_after_filter(state):
    assert analytics.chart_versions(state)["previous"] is None

    s = transitions.apply_filter(state, make_filter("region", ["north", "east"], match="prefix"))
    versions = analytics.chart_versions(s)
    assert [d["region"] for d in versions["current"]] == ["East", "North"]
    assert len(versions["previous"]) == 4


def test_kpis():
    assert analytics.kpis(SALES_DATA) == {
        "total_revenue": 228000,
        "total_sales": 15,
        "avg_sale_value": 15200,
    }
    assert analytics.kpis([])["avg_sale_value"] == 0


def test_highlight_is_strictly_above_threshold():
    ids = analytics.highlighted_row_ids(SALES_DATA)
    assert ids == ["sale-3", "sale-7", "sale-11", "sale-13", "sale-15"]
    assert "sale-9" not in ids  # exactly 17,000


def test_ab_test_report():
    report = analytics.ab_test_report(AB_TEST_DATA)
    a, b = report["variants"]
    assert a["conversion_rate"] == 8.01
    assert b["conversion_rate"] == 11.96
    assert a["cost_per_conversion"] == 6.10
    assert b["cost_per_conversion"] == 4.55
    assert report["winner"] == "B"
    assert 0 < report["p_value"] < 0.05


def test_ab_test_zero_conversions():
    report = analytics.ab_test_report([
        ABTestResult(variant="A", users=0, conversions=0, marketing_spend=100),
        ABTestResult(variant="B", users=10, conversions=0, marketing_spend=100),
    ])
    assert report["variants"][0]["conversion_rate"] == 0
    assert report["variants"][1]["cost_per_conversion"] == 0
    assert report["p_value"] is None


def test_ab_test_empty():
    assert analytics.ab_test_report([]) == {"variants": [], "winner": None, "p_value": None}


def test_revenue_chart_figure_has_previous_trace():
    current = analytics.revenue_by_region(SALES_DATA[:4])
    fig = json.loads(analytics.revenue_chart_figure(current, previous=current))
    assert [t["name"] for t in fig["data"]] == ["Previous", "Current"]
    assert fig["data"][1]["type"] == "bar"


def test_what_if_figure_has_three_cases():
    fig = json.loads(analytics.what_if_figure(WHAT_IF_DATA))
    assert [t["name"] for t in fig["data"]] == ["Optimistic", "Neutral", "Pessimistic"]
    assert list(fig["data"][0]["x"]) == ["Q3 Forecast", "Q4 Forecast"]


@pytest.mark.parametrize("rows", [SALES_DATA[:1], SALES_DATA])
def test_pivot_grand_total_matches_kpis(rows):
    pivot = analytics.pivot_revenue(rows)
    assert pivot["rows"][-1]["Total"] == analytics.kpis(rows)["total_revenue"]
