# =============================================================================
# 08_Expenses.py - Income, expenses, budgets and financial analytics
# =============================================================================
"""
Income / expense ledger with monthly budgets per category. These tables are
not mirrored offline, so the page needs a connection.
"""
from __future__ import annotations
from datetime import date

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from madrasa_core.i18n import label, status_label, t
from madrasa_core.services import analytics
from madrasa_core.ui import add_grid, render_entity_page, setup_page, stat_card, status_badge
from madrasa_core.ui.theme import DANGER_COLOR, PRIMARY_COLOR, SUCCESS_COLOR

stack, lang = setup_page("nav.expenses", "🧾")

if not stack.data_service.is_online:
    st.warning(t("sync.offline_unavailable", lang))
    st.stop()

tab_ledger, tab_budgets, tab_analytics = st.tabs(
    [f"🧾 {t('nav.expenses', lang)}", f"🎯 {t('expenses.budgets', lang)}", f"📈 {t('expenses.analytics', lang)}"]
)

with tab_ledger:
    entries = render_entity_page(stack, lang, "expenses", uploads={"receipt_url": "receipts"})

with tab_budgets:
    budgets = render_entity_page(stack, lang, "budgets")

# =============================================================================
# ANALYTICS
# =============================================================================
with tab_analytics:
    today = date.today()
    col1, col2 = st.columns(2)
    with col1:
        month = st.selectbox(t("common.month", lang), list(range(1, 13)), index=today.month - 1)
    with col2:
        year = int(st.number_input(t("common.year", lang), value=today.year, step=1))

    balance = analytics.income_expense_balance(entries, month, year)
    c1, c2, c3 = st.columns(3)
    with c1:
        stat_card(t("expenses.income", lang), f"{balance['income']:,.0f}", SUCCESS_COLOR)
    with c2:
        stat_card(t("expenses.expense", lang), f"{balance['expense']:,.0f}", DANGER_COLOR)
    with c3:
        color = SUCCESS_COLOR if balance["balance"] >= 0 else DANGER_COLOR
        stat_card(t("expenses.balance", lang), f"{balance['balance']:,.0f}", color)

    by_category = balance["by_category"]
    if not by_category.empty:
        fig = px.bar(
            by_category,
            x="category",
            y="amount",
            color="type",
            color_discrete_map={"income": SUCCESS_COLOR, "expense": DANGER_COLOR},
        )
        fig.update_layout(height=340, xaxis_title=label("category", lang), yaxis_title=label("amount", lang))
        st.plotly_chart(add_grid(fig), use_container_width=True)

    st.subheader(t("expenses.budgets", lang))
    usage = analytics.budget_usage(budgets, entries, month, year)
    if usage.empty:
        st.info(t("common.no_records", lang))
    else:
        for row in usage.itertuples():
            st.markdown(
                f"**{row.category}** · {row.spent:,.0f} / {row.amount:,.0f} "
                f"({row.percentage}%) {status_badge(row.status, lang)}",
                unsafe_allow_html=True,
            )
            st.progress(min(float(row.percentage) / 100, 1.0))
            st.caption(f"{t('expenses.budget.remaining', lang)}: {row.remaining:,.0f}")

    st.subheader(t("expenses.trend", lang))
    trend = analytics.monthly_trend(entries)
    fig = go.Figure()
    fig.add_scatter(x=trend["month"], y=trend["income"], name=status_label("income", lang),
                    mode="lines+markers", line=dict(color=SUCCESS_COLOR))
    fig.add_scatter(x=trend["month"], y=trend["expense"], name=status_label("expense", lang),
                    mode="lines+markers", line=dict(color=DANGER_COLOR))
    fig.add_bar(x=trend["month"], y=trend["net"], name=t("expenses.balance", lang), marker_color=PRIMARY_COLOR)
    fig.update_layout(height=340)
    st.plotly_chart(add_grid(fig), use_container_width=True)
