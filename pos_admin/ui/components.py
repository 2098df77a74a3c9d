"""
Reusable UI components (navigation, header, stat cards, report sections).
"""

from __future__ import annotations

import html
import logging
from datetime import date
from typing import Callable, Optional

import streamlit as st

from pos_admin import domain
from pos_admin.config import CHART_COLORS, NAV_ITEMS, get_settings
from pos_admin.exceptions import PosAdminError, user_message
from pos_admin.logging_config import log_error
from pos_admin.models import BestSeller, CategoryRevenue, SalesReport, User
from pos_admin.ui.session import current_page, navigate, sign_out

logger = logging.getLogger(__name__)


def money(value: float | int | None) -> str:
    return domain.format_currency(value, get_settings().currency_symbol)


def render_sidebar() -> None:
    settings = get_settings()
    st.sidebar.markdown(f'<p class="brand-title">{html.escape(settings.site_name)}</p>', unsafe_allow_html=True)
    st.sidebar.markdown(f'<p class="brand-tagline">{html.escape(settings.site_tagline)}</p>', unsafe_allow_html=True)
    st.sidebar.divider()

    active = current_page()
    for key, label, icon in NAV_ITEMS:
        if st.sidebar.button(
            f"{icon}  {label}",
            key=f"nav_{key}",
            type="primary" if key == active else "secondary",
            use_container_width=True,
        ):
            navigate(key)

    st.sidebar.divider()
    if st.sidebar.button("🚪  Keluar", key="nav_logout", use_container_width=True):
        sign_out()


def render_header(user: User) -> None:
    st.markdown(
        f'<div class="welcome">Welcome, {html.escape(user.display_name)} 👤</div>',
        unsafe_allow_html=True,
    )


def render_page_title(title: str, caption: str) -> None:
    st.title(title)
    st.caption(caption)


def render_action_error(action: str, exc: Exception, fallback: str) -> None:
    """Log a failed action and show the blocking alert."""
    log_error(f"{action}_failed", exc)
    st.error(user_message(exc, fallback))


def render_search_box(key: str, placeholder: str) -> str:
    return st.text_input("Cari", key=key, placeholder=placeholder, label_visibility="collapsed")


# =============================================================================
# Dashboard
# =============================================================================


def render_category_revenue(rows: list[CategoryRevenue]) -> None:
    if not rows:
        st.caption("No category data available")
        return
    for row, share in domain.category_shares(rows):
        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown(f"**{row.category}** ({row.items_sold} items)")
        with col2:
            st.markdown(f"**{money(row.revenue)}**  \n{share}%")
        st.progress(min(share / 100, 1.0))


def render_best_sellers_today(rows: list[BestSeller], limit: int) -> None:
    if not rows:
        st.caption("No sales data available yet.")
        return
    for i, item in enumerate(rows[:limit], start=1):
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(
                f'<span class="rank-badge">{i}</span> **{html.escape(item.product_name)}**',
                unsafe_allow_html=True,
            )
            st.caption(money(item.revenue))
        with col2:
            st.markdown(f"{item.quantity_sold} sold")


# =============================================================================
# Reports
# =============================================================================


def render_report_header(
    title: str,
    subtitle: str,
    *,
    kind: str,
    disabled: bool,
    fetch_pdf: Callable[[], bytes],
    today: date,
) -> None:
    col1, col2 = st.columns([3, 1])
    with col1:
        st.subheader(title)
        st.caption(subtitle)
    with col2:
        render_pdf_download(kind, fetch_pdf=fetch_pdf, today=today, disabled=disabled)


def render_pdf_download(kind: str, *, fetch_pdf: Callable[[], bytes], today: date, disabled: bool = False) -> None:
    """Two-step download: fetch the backend PDF, then hand it to the browser."""
    pdf_key = f"_pdf_{kind}"
    if st.button("Download Report (PDF)", key=f"prepare_{kind}", disabled=disabled, use_container_width=True):
        try:
            with st.spinner("Menyiapkan PDF..."):
                st.session_state[pdf_key] = fetch_pdf()
        except PosAdminError as exc:
            st.session_state.pop(pdf_key, None)
            render_action_error("pdf_download", exc, "Gagal mengunduh PDF. Silakan coba lagi.")

    pdf = st.session_state.get(pdf_key)
    if pdf:
        st.download_button(
            "💾 Simpan PDF",
            data=pdf,
            file_name=domain.pdf_filename(kind, today),
            mime="application/pdf",
            key=f"save_{kind}",
            use_container_width=True,
        )


def render_empty_state() -> None:
    st.info("Tidak ada data untuk periode ini.")


def render_report_content(report: Optional[SalesReport]) -> None:
    if report is None:
        render_empty_state()
        return

    settings = get_settings()
    summary = report.summary
    c1, c2, c3 = st.columns(3)
    c1.metric("Total Pendapatan", money(summary.total_revenue), help="Gross Revenue")
    c2.metric("Total Transaksi", f"{summary.total_transactions:,}".replace(",", "."), help="Volume Penjualan")
    c3.metric("Nilai Rata-rata", money(summary.average_transaction_value), help="Per Customer")

    left, right = st.columns([3, 2])
    with left, st.container(border=True):
        st.markdown("#### Analisis Metode Pembayaran")
        st.caption("Distribusi pendapatan berdasarkan metode pembayaran")
        render_payment_breakdown(report.revenue_by_payment_method)

    with right, st.container(border=True):
        st.markdown("#### Produk Terlaris")
        st.caption(f"Top {settings.best_sellers_limit} produk dengan performa terbaik")
        render_best_seller_bars(report.best_sellers, settings.best_sellers_limit)

    with st.container(border=True):
        st.markdown("#### Riwayat Transaksi")
        st.caption("Daftar transaksi rinci untuk periode ini")
        render_transactions(report, settings.transactions_preview_limit)


def render_payment_breakdown(mapping: dict[str, float]) -> None:
    pairs = domain.payment_breakdown(mapping)
    if not pairs:
        st.caption("Tidak ada data pembayaran")
        return
    st.bar_chart(
        {"Metode": [m for m, _ in pairs], "Pendapatan": [v for _, v in pairs]},
        x="Metode",
        y="Pendapatan",
        color=CHART_COLORS[0],
    )
    total = sum(v for _, v in pairs) or 1
    for method, amount in pairs:
        st.markdown(f"- **{method}**: {money(amount)} ({amount / total * 100:.1f}%)")


def render_best_seller_bars(rows: list[BestSeller], limit: int) -> None:
    bars = domain.best_seller_bars(rows, limit)
    if not bars:
        st.caption("Tidak ada data penjualan item")
        return
    for i, (item, width) in enumerate(bars, start=1):
        badge = "rank-badge first" if i == 1 else "rank-badge"
        st.markdown(
            f'<span class="{badge}">{i}</span> {html.escape(item.product_name)} '
            f"· {item.quantity_sold} terjual",
            unsafe_allow_html=True,
        )
        st.progress(width / 100)


def render_transactions(report: SalesReport, limit: int) -> None:
    if not report.transactions:
        st.caption("Belum ada transaksi pada periode ini.")
        return
    rows = [
        {
            "No. Transaksi": txn.reference,
            "Tanggal": domain.format_date(txn.created_at),
            "Kasir": txn.cashier or "-",
            "Metode": txn.payment_method or "-",
            "Items": txn.item_count,
            "Total": money(txn.total_amount),
        }
        for txn in report.transactions[:limit]
    ]
    st.dataframe(rows, hide_index=True, use_container_width=True)
