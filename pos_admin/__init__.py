"""
POS admin dashboard.

Back-office Streamlit UI for a point-of-sale REST backend: products,
categories, users and sales reports.
"""

from __future__ import annotations

__version__ = "0.1.0"
