# =============================================================================
# 07_Fees.py - Fee records and collection summary
# =============================================================================
from __future__ import annotations
import streamlit as st

from madrasa_core.i18n import status_label, t
from madrasa_core.services import analytics
from madrasa_core.ui import render_entity_page, setup_page, stat_card
from madrasa_core.ui.theme import status_color

stack, lang = setup_page("nav.fees", "💰")

rows = render_entity_page(stack, lang, "fees", uploads={"payment_screenshot_url": "payment-screenshots"})

st.markdown("---")
summary = analytics.fee_summary(rows)
cols = st.columns(5)
with cols[0]:
    stat_card(t("common.total", lang), f"{summary['total_amount']:,.0f}")
for col, status in zip(cols[1:], ("paid", "pending", "overdue", "partial")):
    with col:
        stat_card(
            f"{status_label(status, lang)} ({summary['counts'][status]})",
            f"{summary[f'{status}_amount']:,.0f}",
            status_color(status),
        )
