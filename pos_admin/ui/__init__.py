"""
Streamlit UI package.

Keeps Streamlit concerns in pos_admin/ui/* while the entrypoint stays at
pos_admin/app.py (streamlit run pos_admin/app.py).
"""

from __future__ import annotations
