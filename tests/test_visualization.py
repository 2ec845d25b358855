import pandas as pd
import plotly.graph_objects as go

from finance_tracker.budgets import NEAR_LIMIT, OVER_BUDGET, BudgetProgress
from finance_tracker.models import Budget
from finance_tracker.visualization import (
    STATUS_COLORS,
    create_budget_progress_chart,
    create_category_pie_chart,
    create_monthly_trend_chart,
    create_top_categories_chart,
)


def test_empty_inputs_give_placeholder_figures():
    figures = [
        create_category_pie_chart({}),
        create_monthly_trend_chart(pd.DataFrame(columns=['Month', 'Income', 'Expenses'])),
        create_top_categories_chart([]),
        create_budget_progress_chart([]),
    ]
    for fig in figures:
        assert isinstance(fig, go.Figure)
        assert fig.layout.title.text == 'No data to display'
        assert len(fig.data) == 0


def test_category_pie_chart():
    fig = create_category_pie_chart({'Food': 50.0, 'Travel': 20.0})
    assert fig.data[0].type == 'pie'
    assert list(fig.data[0].labels) == ['Food', 'Travel']
    assert fig.layout.title.text == 'Expenses by Category'


def test_monthly_trend_chart_has_income_and_expense_bars():
    trend = pd.DataFrame({'Month': ['2024-01', '2024-02'], 'Income': [1000.0, 0.0], 'Expenses': [50.0, 30.0]})
    fig = create_monthly_trend_chart(trend, title='Trend')
    assert [trace.name for trace in fig.data] == ['Income', 'Expenses']
    assert fig.layout.barmode == 'group'
    assert fig.layout.title.text == 'Trend'


def test_top_categories_largest_on_top():
    fig = create_top_categories_chart([('Food', 90.0), ('Travel', 40.0)])
    assert list(fig.data[0].y) == ['Travel', 'Food']


def test_budget_chart_colours_by_status():
    rows = [
        BudgetProgress(Budget(id='a', category='Food', amount=100), 100, 80, 80, NEAR_LIMIT),
        BudgetProgress(Budget(id='b', category='Travel', amount=100), 100, 95, 95, OVER_BUDGET),
    ]
    fig = create_budget_progress_chart(rows)
    spent = fig.data[1]
    assert list(spent.marker.color) == [STATUS_COLORS[NEAR_LIMIT], STATUS_COLORS[OVER_BUDGET]]
