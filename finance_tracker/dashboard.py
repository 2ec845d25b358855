"""Finance Tracker Dashboard - Main Entry Point.

This is the landing page of the multi-page Streamlit app. Signed-out users
see the welcome screen; signed-in users see their totals, charts and most
recent transactions. The other sections live in the pages/ directory.
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from .analytics import TransactionAnalytics
from .currency import format_currency
from .periods import ALL_TIME, PERIOD_LABELS, PERIOD_OPTIONS
from .session import FinanceSession
from .shared_sidebar import render_shared_sidebar
from .visualization import (
    create_category_pie_chart,
    create_monthly_trend_chart,
    create_top_categories_chart,
)

RECENT_COUNT = 5


def main():
    """Main entry point for the finance tracker dashboard."""
    st.set_page_config(
        page_title="Finance Tracker",
        page_icon="💰",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    session = render_shared_sidebar()
    if session is None:
        _render_welcome_screen()
        return

    st.header(f"Welcome back, {session.user.name}!")
    period_key = st.selectbox(
        "Period",
        options=PERIOD_OPTIONS,
        index=PERIOD_OPTIONS.index(ALL_TIME),
        format_func=lambda key: PERIOD_LABELS[key],
    )
    analytics = session.analytics(period_key)

    if analytics.data.empty:
        st.info("No transactions yet. Add your first one on the ✏️ Transactions page.")
        return

    _render_metrics(analytics)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(create_category_pie_chart(analytics.category_breakdown()), use_container_width=True)
    with col2:
        st.plotly_chart(create_monthly_trend_chart(analytics.monthly_trend_frame()), use_container_width=True)

    st.plotly_chart(create_top_categories_chart(analytics.top_categories()), use_container_width=True)
    _render_recent_transactions(session, analytics)


def _render_metrics(analytics: TransactionAnalytics) -> None:
    summary = analytics.summary()
    currency = summary['currency']
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Income", format_currency(summary['total_income'], currency))
    col2.metric("Total Expenses", format_currency(summary['total_expenses'], currency))
    col3.metric("Net Balance", format_currency(summary['net_balance'], currency))
    col4.metric("Savings Rate", f"{summary['savings_rate']:.1f}%")


def _render_recent_transactions(session: FinanceSession, analytics: TransactionAnalytics) -> None:
    st.subheader("Recent Transactions")
    recent = analytics.recent_transactions(RECENT_COUNT)
    table = pd.DataFrame({
        'Date': recent['Date'],
        'Description': recent['Description'],
        'Category': recent['Category'],
        'Type': recent['Type'].str.title(),
        'Amount': [session.format(value) for value in recent['Converted Amount']],
    })
    st.dataframe(table, use_container_width=True, hide_index=True)


def _render_welcome_screen() -> None:
    """Render welcome screen when nobody is signed in."""
    st.markdown("""
    # Welcome to Your Finance Tracker! 💰

    This tracker helps you:
    - 📊 **See where your money goes** by category and month
    - 📋 **Set budgets** for each spending category
    - 📈 **Download reports** for any period as CSV or text
    - 💱 **Switch between USD and INR** at any time

    ## Getting Started

    1. **Sign in or register** using the sidebar
    2. **Use the pages** in the sidebar to navigate different sections:
       - ✏️ **Transactions**: Add, edit and delete income and expenses
       - 📋 **Budgets**: Create and track category budgets
       - 📈 **Reports**: Period summaries and downloads
       - 🗄️ **Data**: Export, import or clear your data
    """)
