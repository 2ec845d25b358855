"""Plotly visualisation helpers for the finance tracker.

Each function takes a value produced by :mod:`finance_tracker.analytics` or
:mod:`finance_tracker.budgets` and returns a `plotly.graph_objects.Figure`
that Streamlit renders via ``st.plotly_chart``. Empty inputs produce an
empty figure titled "No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Dict, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .budgets import NEAR_LIMIT, ON_TRACK, OVER_BUDGET, BudgetProgress

GREEN_PALETTE = [
    '#16a34a',
    '#10b981',
    '#059669',
    '#047857',
    '#065f46',
    '#f59e0b',
    '#ef4444',
    '#ec4899',
    '#8b5cf6',
    '#6366f1',
]

STATUS_COLORS = {
    ON_TRACK: '#16a34a',
    NEAR_LIMIT: '#f59e0b',
    OVER_BUDGET: '#ef4444',
}


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_category_pie_chart(breakdown: Dict[str, float], title: str | None = None) -> go.Figure:
    """Pie chart of expense totals per category.

    Parameters
    ----------
    breakdown : dict
        Mapping of category name to summed expense amount.
    title : str, optional
        Chart title.
    """
    if not breakdown:
        return _empty_figure()
    df = pd.DataFrame({'Category': list(breakdown.keys()), 'Amount': list(breakdown.values())})
    fig = px.pie(df, names='Category', values='Amount', color_discrete_sequence=GREEN_PALETTE)
    fig.update_layout(title=title or "Expenses by Category")
    return fig


def create_monthly_trend_chart(trend: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped bar chart of monthly income vs. expenses.

    ``trend`` is the frame returned by
    :meth:`TransactionAnalytics.monthly_trend_frame` (``Month``, ``Income``,
    ``Expenses`` columns).
    """
    if trend.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(name='Income', x=trend['Month'], y=trend['Income'], marker_color=GREEN_PALETTE[0]))
    fig.add_trace(go.Bar(name='Expenses', x=trend['Month'], y=trend['Expenses'], marker_color=GREEN_PALETTE[6]))
    fig.update_layout(
        title=title or "Monthly Trend",
        barmode='group',
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig


def create_top_categories_chart(top: Sequence[tuple[str, float]], title: str | None = None) -> go.Figure:
    """Horizontal bar chart of the top spending categories, largest on top."""
    if not top:
        return _empty_figure()
    df = pd.DataFrame(list(top), columns=['Category', 'Amount']).iloc[::-1]
    fig = px.bar(df, x='Amount', y='Category', orientation='h', color_discrete_sequence=GREEN_PALETTE)
    fig.update_layout(title=title or "Top Spending Categories")
    return fig


def create_budget_progress_chart(progress: Sequence[BudgetProgress], title: str | None = None) -> go.Figure:
    """Budget vs. spent bars, coloured by budget status."""
    if not progress:
        return _empty_figure()
    categories = [row.budget.category for row in progress]
    fig = go.Figure()
    fig.add_trace(go.Bar(name='Budget', x=categories, y=[row.limit for row in progress], marker_color='#94a3b8'))
    fig.add_trace(
        go.Bar(
            name='Spent',
            x=categories,
            y=[row.spent for row in progress],
            marker_color=[STATUS_COLORS.get(row.status, GREEN_PALETTE[0]) for row in progress],
        )
    )
    fig.update_layout(title=title or "Budget vs Actual Spending", barmode='group')
    return fig
