"""
Analytics - the numbers behind the canvas widgets.

Pivot table, revenue-by-region chart series, KPI cards, A/B test report and
the conditional-formatting highlight. Region and product names are normalized
before grouping so the raw (uncleaned) data still groups correctly.
"""

from typing import Dict, List, Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from scipy import stats as scipy_stats

from .models import ABTestResult, DashboardState, Row, WhatIfScenario
from .utils import normalize_product, normalize_region

HIGH_REVENUE_THRESHOLD = 17000


def _frame(rows: List[Row]) -> pd.DataFrame:
    df = pd.DataFrame([{'product': r.product, 'region': r.region, 'revenue': r.revenue} for r in rows])
    df['product'] = df['product'].map(normalize_product)
    df['region'] = df['region'].map(normalize_region)
    return df


def pivot_revenue(rows: List[Row]) -> Dict:
    """
    Cross-tabulate revenue with products as rows and regions as columns.

    Returns:
        {"headers": ["Product", <regions sorted>, "Total"],
         "rows": [{"Product": ..., <region>: revenue, ..., "Total": ...}, ...,
                  {"Product": "Grand Total", ...}]}
        Both lists are empty when there are no rows.
    """
    if not rows:
        return {'headers': [], 'rows': []}

    df = _frame(rows)
    table = df.pivot_table(index='product', columns='region', values='revenue',
                           aggfunc='sum', fill_value=0)
    table = table.sort_index().sort_index(axis=1)
    regions = [str(c) for c in table.columns]
    table['Total'] = table[regions].sum(axis=1)
    table.loc['Grand Total'] = table.sum(axis=0)

    records = []
    for product, values in table.iterrows():
        record = {'Product': product}
        record.update({col: float(values[col]) for col in regions + ['Total']})
        records.append(record)
    return {'headers': ['Product'] + regions + ['Total'], 'rows': records}


def revenue_by_region(rows: List[Row]) -> List[Dict]:
    """Summed revenue per normalized region, largest first."""
    if not rows:
        return []
    totals = _frame(rows).groupby('region')['revenue'].sum()
    totals = totals.sort_values(ascending=False, kind='stable')
    return [{'region': region, 'revenue': float(revenue)} for region, revenue in totals.items()]


def chart_versions(state: DashboardState) -> Dict:
    """The chart's current series, and the pre-filter series if a filter was applied."""
    previous = state.previous_filtered_rows
    return {
        'current': revenue_by_region(state.filtered_rows),
        'previous': revenue_by_region(previous) if previous is not None else None,
    }


def kpis(rows: List[Row]) -> Dict:
    total_revenue = float(sum(r.revenue for r in rows))
    total_sales = len(rows)
    avg_sale_value = total_revenue / total_sales if total_sales > 0 else 0.0
    return {
        'total_revenue': total_revenue,
        'total_sales': total_sales,
        'avg_sale_value': avg_sale_value,
    }


def highlighted_row_ids(rows: List[Row], threshold: float = HIGH_REVENUE_THRESHOLD) -> List[str]:
    """Ids of rows whose revenue is strictly above threshold."""
    return [r.id for r in rows if r.revenue > threshold]


def ab_test_report(results: List[ABTestResult]) -> Dict:
    """
    Conversion rate (%), cost per conversion and the winner by conversion rate.

    p_value is a chi-square test of conversions vs non-conversions across
    variants; None when there are fewer than two variants or no conversions.
    """
    variants = []
    for r in results:
        rate = (r.conversions / r.users) * 100 if r.users else 0.0
        cost = r.marketing_spend / r.conversions if r.conversions else 0.0
        variants.append({
            'variant': r.variant,
            'users': r.users,
            'conversions': r.conversions,
            'marketingSpend': r.marketing_spend,
            'conversion_rate': round(rate, 2),
            'cost_per_conversion': round(cost, 2),
        })

    winner = None
    if results:
        best = results[0]
        for r in results[1:]:
            best_rate = best.conversions / best.users if best.users else 0.0
            rate = r.conversions / r.users if r.users else 0.0
            if rate >= best_rate:
                best = r
        winner = best.variant

    p_value = None
    table = np.array([[r.conversions, max(r.users - r.conversions, 0)] for r in results if r.users > 0])
    # chi2 needs two non-empty variants and both outcomes observed
    if len(table) >= 2 and (table.sum(axis=0) > 0).all():
        _, p_value, _, _ = scipy_stats.chi2_contingency(table)
        p_value = float(p_value)

    return {'variants': variants, 'winner': winner, 'p_value': p_value}


# --- Figures ---

def revenue_chart_figure(current: List[Dict], previous: Optional[List[Dict]] = None,
                         title: str = "Revenue by Region") -> str:
    """Plotly bar chart JSON for revenue_by_region output; previous adds a second trace."""
    fig = go.Figure()
    if previous is not None:
        fig.add_trace(go.Bar(name='Previous', x=[d['region'] for d in previous],
                             y=[d['revenue'] for d in previous], opacity=0.5))
    fig.add_trace(go.Bar(name='Current', x=[d['region'] for d in current],
                         y=[d['revenue'] for d in current]))
    fig.update_layout(title=title, xaxis_title='Region', yaxis_title='Revenue ($)', barmode='group')
    return fig.to_json()


def what_if_figure(scenarios: List[WhatIfScenario], title: str = "What-If: Marketing Spend +20%") -> str:
    names = [s.name for s in scenarios]
    fig = go.Figure()
    for case in ('optimistic', 'neutral', 'pessimistic'):
        fig.add_trace(go.Bar(name=case.title(), x=names, y=[getattr(s, case) for s in scenarios]))
    fig.update_layout(title=title, yaxis_title='Revenue ($)', barmode='group')
    return fig.to_json()
