import streamlit as st

from madrasa_core.i18n import is_rtl

# === COLOR PALETTE ===
PRIMARY_COLOR    = "#0f766e"
SECONDARY_COLOR  = "#155e75"
SUCCESS_COLOR    = "#10b981"
WARNING_COLOR    = "#f59e0b"
DANGER_COLOR     = "#ef4444"
TEXT_COLOR       = "#1f2937"
SUBTLE_TEXT      = "#4b5563"
GRID_COLOR       = "#e5e7eb"
BACKGROUND_COLOR = "#f8faf9"
CARD_BG_LIGHT    = "#ffffff"

STATUS_COLORS = {
    "present": SUCCESS_COLOR,
    "paid": SUCCESS_COLOR,
    "active": SUCCESS_COLOR,
    "on_track": SUCCESS_COLOR,
    "late": WARNING_COLOR,
    "pending": WARNING_COLOR,
    "partial": WARNING_COLOR,
    "warning": WARNING_COLOR,
    "absent": DANGER_COLOR,
    "overdue": DANGER_COLOR,
    "exceeded": DANGER_COLOR,
}


def apply_css(lang: str = "en"):
    """Base styles; switches the main area to right-to-left for Urdu."""
    st.markdown(f"""
        <style>
        .main {{
            background-color: {BACKGROUND_COLOR};
            color: {TEXT_COLOR};
            font-family: 'Segoe UI','Inter',sans-serif;
        }}
        .main-header {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            padding: 1.6rem 2rem; border-radius: 16px; margin-bottom: 1.5rem;
            box-shadow: 0 8px 24px rgba(15,118,110,.25);
        }}
        .metric-card {{
            background: {CARD_BG_LIGHT}; padding: 18px; border-radius: 12px;
            box-shadow: 0 2px 8px rgba(0,0,0,0.08); margin: 8px 0; border: 1px solid {GRID_COLOR};
        }}
        .metric-card .metric-label {{ color: {SUBTLE_TEXT}; font-size: .85rem; }}
        .metric-card .metric-value {{ color: {TEXT_COLOR}; font-size: 1.7rem; font-weight: 700; }}
        .stButton button {{ border-radius: 10px; font-weight: 600; }}
        h1,h2,h3,h4 {{ color: {TEXT_COLOR}; font-weight: 600; }}
        [data-testid="stSidebar"] {{ background-color: {CARD_BG_LIGHT}; border-right: 1px solid {GRID_COLOR}; }}
        </style>
    """, unsafe_allow_html=True)

    if is_rtl(lang):
        apply_rtl_css()


def apply_rtl_css():
    """Right-to-left layout and a Nastaliq font for Urdu text."""
    st.markdown("""
        <style>
        @import url('https://fonts.googleapis.com/css2?family=Noto+Nastaliq+Urdu:wght@400;700&display=swap');
        .main .block-container, [data-testid="stSidebar"] {
            direction: rtl;
            text-align: right;
            font-family: 'Noto Nastaliq Urdu', 'Segoe UI', sans-serif;
        }
        .main .block-container p, .main .block-container label { line-height: 2; }
        [data-testid="stDataFrame"] { direction: ltr; }
        </style>
    """, unsafe_allow_html=True)


def status_color(status) -> str:
    return STATUS_COLORS.get(str(status), SUBTLE_TEXT)
