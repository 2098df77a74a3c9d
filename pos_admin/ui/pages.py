"""
Page renderers for Streamlit UI.

Every page fetches fresh data on each rerun and keeps nothing beyond the
current session. Mutations happen in dialogs; a successful submit closes the
dialog with a rerun, which re-fetches the list.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

import streamlit as st

from pos_admin import auth, domain
from pos_admin.config import get_settings
from pos_admin.exceptions import PosAdminError
from pos_admin.models import Category, Product, Role, User
from pos_admin.services import categories as category_service
from pos_admin.services import products as product_service
from pos_admin.services import reports as report_service
from pos_admin.services import users as user_service
from pos_admin.services.products import ImageFile
from pos_admin.ui.components import (
    money,
    render_action_error,
    render_best_sellers_today,
    render_category_revenue,
    render_page_title,
    render_pdf_download,
    render_report_content,
    render_report_header,
    render_search_box,
)
from pos_admin.ui.session import get_client, pop_flash, set_flash, sign_in

logger = logging.getLogger(__name__)

_ID_MONTHS = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)
_ID_WEEKDAYS = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")


def _long_date(day: date) -> str:
    return f"{_ID_WEEKDAYS[day.weekday()]}, {day.day} {_ID_MONTHS[day.month - 1]} {day.year}"


def _show_flash() -> None:
    message = pop_flash()
    if message:
        st.toast(message)


# =============================================================================
# Login
# =============================================================================


def render_login_page() -> None:
    _show_flash()
    _left, center, _right = st.columns([1, 2, 1])
    with center, st.container(border=True):
        st.markdown("## 🏪 Admin Portal")
        st.caption("Enter your credentials to access the dashboard")

        with st.form("login_form"):
            email = st.text_input("Email", placeholder="admin@pos.com")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign In", type="primary", use_container_width=True)

        if submitted:
            if not email or not password:
                st.error("Email and password are required.")
                return
            try:
                with st.spinner("Signing in..."):
                    result = auth.login(get_client(), email.strip(), password)
            except PosAdminError as exc:
                logger.warning("Login failed for %s: %s", email, exc)
                st.error(exc.message or "Invalid credentials")
                return
            sign_in(result)

    st.markdown(
        f'<div class="login-footer">&copy; {date.today().year} POS System. All rights reserved.</div>',
        unsafe_allow_html=True,
    )


# =============================================================================
# Dashboard
# =============================================================================


def render_dashboard_page(today: Optional[date] = None) -> None:
    today = today or date.today()
    settings = get_settings()
    render_page_title("Dashboard", "Overview of your store's performance.")

    try:
        with st.spinner("Memuat data..."):
            stats = report_service.load_dashboard(get_client(), today)
    except PosAdminError as exc:
        logger.warning("Failed to fetch dashboard stats: %s", exc)
        st.warning("Failed to load some dashboard data. Please check your connection.")
        stats = report_service.DashboardStats()

    daily_summary = stats.daily.summary if stats.daily else None
    monthly_summary = stats.monthly.summary if stats.monthly else None

    c1, c2, c3, c4 = st.columns(4)
    c1.metric(
        "Today's Revenue",
        money(daily_summary.total_revenue if daily_summary else 0),
        help=f"{daily_summary.total_transactions if daily_summary else 0} transactions",
    )
    c2.metric(
        "Monthly Revenue",
        money(monthly_summary.total_revenue if monthly_summary else 0),
        help="This month so far",
    )
    c3.metric("Total Products", "--", help="Active products")
    c4.metric("Active Cashiers", "--", help="Staff members")

    left, right = st.columns([4, 3])
    with left, st.container(border=True):
        st.markdown("#### Revenue by Category")
        st.caption("Monthly breakdown by product category.")
        render_category_revenue(stats.category_revenue)
    with right, st.container(border=True):
        st.markdown("#### Best Sellers Today")
        st.caption("Top selling products")
        render_best_sellers_today(stats.daily.best_sellers if stats.daily else [], settings.best_sellers_limit)


# =============================================================================
# Categories
# =============================================================================


@st.dialog("Tambah Kategori")
def _add_category_dialog() -> None:
    with st.form("add_category"):
        name = st.text_input("Category Name")
        description = st.text_area("Description")
        submitted = st.form_submit_button("Simpan", type="primary")
    if submitted:
        try:
            category_service.create_category(get_client(), {"name": name, "description": description})
        except PosAdminError as exc:
            render_action_error("add_category", exc, "Failed to add category")
            return
        set_flash("Kategori ditambahkan")
        st.rerun()


@st.dialog("Ubah Kategori")
def _edit_category_dialog(category: Category) -> None:
    with st.form(f"edit_category_{category.id}"):
        name = st.text_input("Category Name", value=category.name)
        description = st.text_area("Description", value=category.description or "")
        submitted = st.form_submit_button("Simpan", type="primary")
    if submitted:
        try:
            category_service.update_category(
                get_client(), category.id, {"name": name, "description": description}
            )
        except PosAdminError as exc:
            render_action_error("update_category", exc, "Failed to update category")
            return
        set_flash("Kategori diperbarui")
        st.rerun()


@st.dialog("Hapus Kategori")
def _delete_category_dialog(category: Category) -> None:
    st.write(f"Hapus kategori **{category.name}**? Tindakan ini tidak dapat dibatalkan.")
    if st.button("Hapus", type="primary", key=f"confirm_delete_category_{category.id}"):
        try:
            category_service.delete_category(get_client(), category.id)
        except PosAdminError as exc:
            render_action_error("delete_category", exc, "Failed to delete category")
            return
        set_flash("Kategori dihapus")
        st.rerun()


def render_categories_page() -> None:
    _show_flash()
    render_page_title("Kategori", "Kelola kategori produk.")

    col1, col2 = st.columns([3, 1])
    with col1:
        query = render_search_box("category_search", "Cari kategori...")
    with col2:
        if st.button("➕ Tambah Kategori", type="primary", use_container_width=True):
            _add_category_dialog()

    try:
        items = category_service.list_categories(get_client())
    except PosAdminError as exc:
        render_action_error("fetch_categories", exc, "Failed to fetch categories")
        return

    shown = domain.filter_categories(items, query)
    if not shown:
        st.info("Tidak ada kategori.")
        return

    for category in shown:
        with st.container(border=True):
            c1, c2, c3 = st.columns([6, 1, 1])
            with c1:
                st.markdown(f"**{category.name}**")
                if category.description:
                    st.caption(category.description)
            with c2:
                if st.button("✏️", key=f"edit_category_{category.id}", help="Edit"):
                    _edit_category_dialog(category)
            with c3:
                if st.button("🗑️", key=f"delete_category_{category.id}", help="Delete"):
                    _delete_category_dialog(category)


# =============================================================================
# Products
# =============================================================================


def _picked_image(uploaded) -> Optional[ImageFile]:
    if uploaded is None:
        return None
    return ImageFile(content=uploaded.getvalue(), filename=uploaded.name, content_type=uploaded.type)


def _product_fields(prefix: str, categories: list[Category], product: Optional[Product] = None) -> dict:
    category_ids = [str(c.id) for c in categories]
    names = {str(c.id): c.name for c in categories}
    current = str(product.category_id) if product and product.category_id is not None else None

    name = st.text_input("Nama Produk *", value=product.name if product else "", key=f"{prefix}_name")
    description = st.text_area(
        "Deskripsi", value=(product.description or "") if product else "", key=f"{prefix}_description"
    )
    category_id = st.selectbox(
        "Kategori *",
        category_ids,
        index=category_ids.index(current) if current in category_ids else None,
        format_func=lambda cid: names.get(cid, cid),
        placeholder="Pilih kategori",
        key=f"{prefix}_category",
    )
    c1, c2 = st.columns(2)
    with c1:
        price = st.number_input(
            "Harga (Rp) *", min_value=0.0, step=500.0, value=float(product.price) if product else 0.0,
            key=f"{prefix}_price",
        )
    with c2:
        stock = st.number_input(
            "Stok *", min_value=0, step=1, value=int(product.stock) if product else 0, key=f"{prefix}_stock"
        )
    return {
        "name": name,
        "description": description,
        "categoryId": category_id,
        "price": price,
        "stock": int(stock),
    }


def _image_picker(prefix: str, product: Optional[Product] = None):
    uploaded = st.file_uploader("Gambar", type=["png", "jpg", "jpeg", "webp"], key=f"{prefix}_image")
    if uploaded is not None:
        st.image(uploaded, width=160)
    elif product and product.image_url:
        st.image(domain.resolve_image_url(product.image_url, get_settings().api_url), width=160)
    return uploaded


@st.dialog("Tambah Produk", width="large")
def _add_product_dialog(categories: list[Category]) -> None:
    fields = _product_fields("add_product", categories)
    uploaded = _image_picker("add_product")
    if st.button("Simpan", type="primary", key="add_product_submit"):
        try:
            with st.spinner("Menyimpan..."):
                product_service.create_product(get_client(), fields, _picked_image(uploaded))
        except PosAdminError as exc:
            render_action_error("add_product", exc, "Gagal menambah produk")
            return
        set_flash("Produk ditambahkan")
        st.rerun()


@st.dialog("Ubah Produk", width="large")
def _edit_product_dialog(product: Product, categories: list[Category]) -> None:
    prefix = f"edit_product_{product.id}"
    fields = _product_fields(prefix, categories, product)
    uploaded = _image_picker(prefix, product)
    if st.button("Simpan", type="primary", key=f"{prefix}_submit"):
        try:
            with st.spinner("Menyimpan..."):
                product_service.update_product(get_client(), product.id, fields, _picked_image(uploaded))
        except PosAdminError as exc:
            render_action_error("update_product", exc, "Gagal memperbarui produk")
            return
        set_flash("Produk diperbarui")
        st.rerun()


@st.dialog("Hapus Produk")
def _delete_product_dialog(product: Product) -> None:
    st.write(f"Hapus produk **{product.name}**? Tindakan ini tidak dapat dibatalkan.")
    if st.button("Hapus", type="primary", key=f"confirm_delete_product_{product.id}"):
        try:
            product_service.delete_product(get_client(), product.id)
        except PosAdminError as exc:
            render_action_error("delete_product", exc, "Gagal menghapus produk")
            return
        set_flash("Produk dihapus")
        st.rerun()


def render_products_page() -> None:
    _show_flash()
    render_page_title("Produk", "Kelola menu dan stok produk.")

    client = get_client()
    try:
        items = product_service.list_products(client)
        categories = category_service.list_categories(client)
    except PosAdminError as exc:
        render_action_error("fetch_products", exc, "Gagal memuat produk")
        return

    col1, col2 = st.columns([3, 1])
    with col1:
        query = render_search_box("product_search", "Cari produk atau kategori...")
    with col2:
        if st.button("➕ Tambah Produk", type="primary", use_container_width=True):
            _add_product_dialog(categories)

    shown = domain.filter_products(items, query)
    if not shown:
        st.info("Tidak ada produk.")
        return

    api_url = get_settings().api_url
    cols = st.columns(3)
    for i, product in enumerate(shown):
        with cols[i % 3], st.container(border=True):
            image = domain.resolve_image_url(product.image_url, api_url)
            if image:
                st.image(image, use_container_width=True)
            else:
                st.markdown("### 📦")
            st.markdown(f"**{product.name}**")
            st.caption(product.category_name or "Tanpa kategori")
            st.markdown(f"{money(product.price)} · Stok: {product.stock}")
            if product.description:
                st.caption(product.description)
            b1, b2 = st.columns(2)
            with b1:
                if st.button("✏️ Ubah", key=f"edit_product_{product.id}", use_container_width=True):
                    _edit_product_dialog(product, categories)
            with b2:
                if st.button("🗑️ Hapus", key=f"delete_product_{product.id}", use_container_width=True):
                    _delete_product_dialog(product)


# =============================================================================
# Users
# =============================================================================


def _role_badge(role: Role) -> str:
    return f'<span class="role-badge {role.value.lower()}">{role.value}</span>'


@st.dialog("Tambah Pengguna")
def _add_user_dialog() -> None:
    with st.form("add_user"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        name = st.text_input("Full Name")
        role = st.selectbox("Role", [r.value for r in Role], index=1)
        submitted = st.form_submit_button("Simpan", type="primary")
    if submitted:
        try:
            user_service.create_user(
                get_client(), {"email": email, "password": password, "name": name, "role": role}
            )
        except PosAdminError as exc:
            render_action_error("add_user", exc, "Failed to add user")
            return
        set_flash("Pengguna ditambahkan")
        st.rerun()


@st.dialog("Ubah Pengguna")
def _edit_user_dialog(user: User) -> None:
    with st.form(f"edit_user_{user.id}"):
        name = st.text_input("Name", value=user.name or "")
        st.text_input("Email", value=user.email, disabled=True)
        st.text_input("Password (Leave blank to keep current)", type="password", disabled=True)
        st.selectbox("Role", [user.role.value], disabled=True)
        st.caption("Hanya nama yang dapat diubah.")
        submitted = st.form_submit_button("Simpan", type="primary")
    if submitted:
        try:
            user_service.update_user(get_client(), user.id, {"name": name})
        except PosAdminError as exc:
            render_action_error("update_user", exc, "Failed to update user")
            return
        set_flash("Pengguna diperbarui")
        st.rerun()


@st.dialog("Hapus Pengguna")
def _delete_user_dialog(user: User) -> None:
    st.write(f"Hapus pengguna **{user.display_name}**? Tindakan ini tidak dapat dibatalkan.")
    if st.button("Hapus", type="primary", key=f"confirm_delete_user_{user.id}"):
        try:
            user_service.delete_user(get_client(), user.id)
        except PosAdminError as exc:
            render_action_error("delete_user", exc, "Failed to delete user")
            return
        set_flash("Pengguna dihapus")
        st.rerun()


def render_users_page() -> None:
    _show_flash()
    render_page_title("Pengguna", "Kelola akun admin dan kasir.")

    col1, col2 = st.columns([3, 1])
    with col1:
        query = render_search_box("user_search", "Cari nama atau email...")
    with col2:
        if st.button("➕ Tambah Pengguna", type="primary", use_container_width=True):
            _add_user_dialog()

    try:
        items = user_service.list_users(get_client())
    except PosAdminError as exc:
        render_action_error("fetch_users", exc, "Failed to fetch users")
        return

    shown = domain.filter_users(items, query)
    if not shown:
        st.info("Tidak ada pengguna.")
        return

    for user in shown:
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([5, 2, 1, 1])
            with c1:
                st.markdown(f"**{user.name or '-'}**")
                st.caption(user.email)
            with c2:
                st.markdown(_role_badge(user.role), unsafe_allow_html=True)
            with c3:
                if st.button("✏️", key=f"edit_user_{user.id}", help="Edit"):
                    _edit_user_dialog(user)
            with c4:
                if st.button("🗑️", key=f"delete_user_{user.id}", help="Delete"):
                    _delete_user_dialog(user)


# =============================================================================
# Reports
# =============================================================================


def render_reports_page(today: Optional[date] = None) -> None:
    today = today or date.today()
    client = get_client()
    render_page_title("Dashboard Laporan", "Ringkasan eksekutif dan analisis performa bisnis Anda.")

    with st.spinner("Memuat laporan..."):
        reports = report_service.load_period_reports(client, today)

    tab_daily, tab_weekly, tab_monthly, tab_custom = st.tabs(["Harian", "Mingguan", "Bulanan", "Kustom"])

    with tab_daily:
        render_report_header(
            "Laporan Harian",
            f"Ringkasan penjualan untuk {_long_date(today)}",
            kind="daily",
            disabled=reports.daily is None,
            fetch_pdf=lambda: report_service.export_pdf(client, "daily", today),
            today=today,
        )
        render_report_content(reports.daily)

    with tab_weekly:
        render_report_header(
            "Laporan Mingguan",
            "Analisis performa minggu ini",
            kind="weekly",
            disabled=reports.weekly is None,
            fetch_pdf=lambda: report_service.export_pdf(client, "weekly", today),
            today=today,
        )
        render_report_content(reports.weekly)

    with tab_monthly:
        render_report_header(
            "Laporan Bulanan",
            f"Analisis performa bulan {_ID_MONTHS[today.month - 1]} {today.year}",
            kind="monthly",
            disabled=reports.monthly is None,
            fetch_pdf=lambda: report_service.export_pdf(client, "monthly", today),
            today=today,
        )
        render_report_content(reports.monthly)

    with tab_custom:
        _render_custom_report(client, today)


def _render_custom_report(client, today: date) -> None:
    with st.container(border=True):
        st.markdown("#### Pilih Periode Laporan")
        st.caption("Tentukan rentang tanggal untuk analisis spesifik")
        c1, c2, c3 = st.columns([2, 2, 1])
        with c1:
            start = st.date_input("Tanggal Mulai", value=None, key="custom_start", format="YYYY-MM-DD")
        with c2:
            end = st.date_input("Tanggal Akhir", value=None, key="custom_end", format="YYYY-MM-DD")
        with c3:
            st.write("")
            generate = st.button("Generate", type="primary", use_container_width=True)

    if generate:
        try:
            with st.spinner("Membuat laporan..."):
                st.session_state["_custom_report"] = report_service.custom(client, start, end)
                st.session_state["_custom_range"] = (start, end)
                st.session_state.pop("_pdf_custom", None)
        except PosAdminError as exc:
            render_action_error("custom_report", exc, "Gagal mengambil laporan. Silakan coba lagi.")
            return

    report = st.session_state.get("_custom_report")
    period = st.session_state.get("_custom_range")
    if report is None or period is None:
        return

    c1, c2 = st.columns([3, 1])
    with c1:
        st.subheader("Laporan Kustom")
        st.caption(f"Periode: {period[0]} s/d {period[1]}")
    with c2:
        render_pdf_download(
            "custom",
            fetch_pdf=lambda: report_service.export_pdf(client, "custom", today, period[0], period[1]),
            today=today,
        )
    render_report_content(report)
