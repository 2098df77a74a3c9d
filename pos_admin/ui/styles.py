"""
UI styling (CSS injected via st.markdown).
"""

from __future__ import annotations

import streamlit as st

THEME_CSS = """
<style>
  :root {
    --bg-primary: #f8fafc;
    --bg-secondary: #0f172a;
    --text-primary: #0f172a;
    --text-sidebar: #cbd5e1;
    --text-muted: #64748b;
    --border-color: #e2e8f0;
    --accent: #7c7fff;
    --accent-light: #eef0ff;
    --danger: #f43f5e;
    --card-bg: #ffffff;
    --shadow-color: rgba(15, 23, 42, 0.08);
  }

  [data-testid="stAppViewContainer"] {
    background-color: var(--bg-primary);
  }

  [data-testid="stSidebar"] {
    background-color: var(--bg-secondary);
  }

  [data-testid="stSidebar"] * {
    color: var(--text-sidebar);
  }
</style>
"""

BASE_CSS = """
<style>
  .block-container { padding-top: 1.5rem; padding-bottom: 2rem; }
  [data-testid="stMetricValue"] { font-size: 1.4rem; font-weight: 700; }
  [data-testid="stMetric"] {
    background: var(--card-bg);
    border: 1px solid var(--border-color);
    border-radius: 12px;
    padding: 1rem 1.25rem;
    box-shadow: 0 1px 3px var(--shadow-color);
  }
  .brand-title { font-size: 1.5rem; font-weight: 700; color: #ffffff !important; margin-bottom: 0; }
  .brand-tagline { font-size: 0.75rem; opacity: 0.6; margin-top: 0; }
  .welcome { text-align: right; color: var(--text-muted); font-size: 0.9rem; }
  .rank-badge {
    display: inline-block;
    width: 1.75rem;
    height: 1.75rem;
    line-height: 1.75rem;
    text-align: center;
    border-radius: 50%;
    background: var(--accent-light);
    color: var(--accent);
    font-weight: 700;
    font-size: 0.8rem;
  }
  .rank-badge.first { background: #fef3c7; color: #b45309; }
  .role-badge {
    padding: 2px 10px;
    border-radius: 999px;
    font-size: 0.75rem;
    font-weight: 600;
  }
  .role-badge.admin { background: #ede9fe; color: #6d28d9; }
  .role-badge.kasir { background: #e0f2fe; color: #0369a1; }
  .login-footer { text-align: center; font-size: 0.75rem; color: var(--text-muted); margin-top: 2rem; }
</style>
"""


def apply_styles() -> None:
    st.markdown(THEME_CSS, unsafe_allow_html=True)
    st.markdown(BASE_CSS, unsafe_allow_html=True)
