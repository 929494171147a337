"""
Seed dataset for the 0str1ch canvas demo.
A quarter of raw sales records (deliberately messy casing so the "clean it up"
step has something to do), plus the fixed A/B test, what-if and forecast data.
"""

from .models import ABTestResult, Activity, LayoutItem, Row, WhatIfScenario


def _row(id, product, region, revenue, month, spend, cac):
    return Row(id=id, product=product, region=region, revenue=revenue, month=month,
               marketing_spend=spend, cac=cac)


SALES_DATA = [
    _row("sale-1",  "Gadget X", "North", 15000, "January",  2000, 133.33),
    _row("sale-2",  "Widget Y", "south", 12000, "January",  1500, 125.00),
    _row("sale-3",  "gizmo z",  "East",  18000, "january",  2500, 138.89),
    _row("sale-4",  "Gadget X", "West",   9000, "January",  1200, 133.33),
    _row("sale-5",  "Gadget X", "North", 16000, "February", 2200, 137.50),
    _row("sale-6",  "Widget Y", "South", 13000, "February", 1800, 138.46),
    _row("sale-7",  "Gizmo Z",  "East",  17500, "February", 2300, 131.43),
    _row("sale-8",  "Widget Y", "West",  10500, "February", 1400, 133.33),
    _row("sale-9",  "gadget x", "North", 17000, "March",    2400, 141.18),
    _row("sale-10", "Widget Y", "South", 14000, "March",    1900, 135.71),
    _row("sale-11", "Gizmo Z",  "EAST",  19000, "March",    2800, 147.37),
    _row("sale-12", "Gadget X", "West",  11000, "March",    1500, 136.36),
    _row("sale-13", "Gizmo Z",  "North", 20000, "April",    3000, 150.00),
    _row("sale-14", "Widget Y", "South", 15000, "April",    2000, 133.33),
    _row("sale-15", "Gadget X", "East",  21000, "April",    3200, 152.38),
]

# The forecast is fixed; no model is consulted for the canvas version.
FORECAST_DATA = [
    _row("forecast-1", "Forecast", "All", 23000, "May",  3300, 155),
    _row("forecast-2", "Forecast", "All", 25500, "June", 3500, 158),
    _row("forecast-3", "Forecast", "All", 24000, "July", 3400, 156),
]

AB_TEST_DATA = [
    ABTestResult(variant="A", users=1024, conversions=82, marketing_spend=500),
    ABTestResult(variant="B", users=1012, conversions=121, marketing_spend=550),
]

WHAT_IF_DATA = [
    WhatIfScenario(name="Q3 Forecast", pessimistic=180000, neutral=220000, optimistic=260000),
    WhatIfScenario(name="Q4 Forecast", pessimistic=200000, neutral=250000, optimistic=310000),
]

# Where each artifact lands when it is added to a sheet.
FULL_LAYOUT = [
    LayoutItem(i="kpi-revenue",         x=0,  y=0,  w=4,  h=4,  min_w=3, min_h=4),
    LayoutItem(i="kpi-sales",           x=4,  y=0,  w=4,  h=4,  min_w=3, min_h=4),
    LayoutItem(i="kpi-avg-sale",        x=8,  y=0,  w=4,  h=4,  min_w=3, min_h=4),
    LayoutItem(i="salesforce-pipeline", x=0,  y=23, w=12, h=9,  min_w=8, min_h=7),
    LayoutItem(i="spreadsheet",         x=0,  y=4,  w=12, h=12, min_w=6, min_h=8),
    LayoutItem(i="chart",               x=12, y=4,  w=12, h=9,  min_w=6, min_h=6),
    LayoutItem(i="ab-test",             x=12, y=13, w=12, h=8,  min_w=6, min_h=6),
    LayoutItem(i="what-if",             x=12, y=21, w=12, h=11, min_w=6, min_h=8),
    LayoutItem(i="forecast",            x=0,  y=16, w=12, h=7,  min_w=8, min_h=6),
    LayoutItem(i="pivot-table",         x=0,  y=32, w=12, h=9,  min_w=8, min_h=6),
]

ARTIFACT_NAMES = {
    "spreadsheet": "@spreadsheet-sales-data",
    "chart": "@chart-revenue-by-region",
    "abTest": "@abtest-new-checkout-flow",
    "whatIf": "@whatif-revenue-scenarios",
    "salesforce": "@workflow-salesforce-sync",
    "pivotTable": "@pivot-sales-summary",
}


def _comment(id, user, fallback, text, artifact, timestamp, resolved=False):
    return Activity(id=id, type="comment", user=user, avatar_fallback=fallback, text=text,
                    artifact_name=artifact, timestamp=timestamp, resolved=resolved)


# Newest first, as the history panel shows them.
SEED_ACTIVITIES = [
    _comment("c11", "Sales Ops", "SO", "This pivot is super helpful for the QBR deck. Thanks!",
             ARTIFACT_NAMES["pivotTable"], "Just now"),
    _comment("c12", "Regional Head", "RH", "Looks like East is our strongest region across all products.",
             ARTIFACT_NAMES["pivotTable"], "Just now"),
    _comment("c7", "CFO", "CFO", "Let's plan for the neutral scenario but be prepared for the pessimistic case.",
             ARTIFACT_NAMES["whatIf"], "1d ago"),
    _comment("c8", "CEO", "CEO", "What initiatives can we launch to hit the optimistic forecast?",
             ARTIFACT_NAMES["whatIf"], "1d ago"),
    _comment("c1", "Product Manager", "PM",
             "Variant B is a clear winner on conversion rate, and the CPC is acceptable. Let's roll it out to 100%.",
             ARTIFACT_NAMES["abTest"], "2d ago"),
    _comment("c2", "Marketing Head", "MH",
             "Agreed. The higher spend is justified by the excellent cost per conversion.",
             ARTIFACT_NAMES["abTest"], "2d ago"),
    _comment("c3", "Jane Doe", "JD", "Great numbers for the East region! Let's double down.",
             ARTIFACT_NAMES["chart"], "4d ago"),
    _comment("c4", "Steve Miller", "SM", "Agreed. The West region needs a new strategy.",
             ARTIFACT_NAMES["chart"], "4d ago", resolved=True),
    _comment("c9", "Finance Analyst", "FA", "Revenue is tracking nicely against our Q2 goals.",
             "KPIs", "5d ago"),
    _comment("c10", "Sales Ops", "SO",
             "Let's keep an eye on the average sale value. It dipped slightly last week.",
             "KPIs", "5d ago"),
]
