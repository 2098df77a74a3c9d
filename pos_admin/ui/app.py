"""
Streamlit UI entrypoint: page config, auth guard and page routing.
"""

from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from pos_admin.auth import is_allowed
from pos_admin.config import get_settings
from pos_admin.logging_config import LogContextManager, configure_logging
from pos_admin.models import User
from pos_admin.ui.components import render_header, render_sidebar
from pos_admin.ui.pages import (
    render_categories_page,
    render_dashboard_page,
    render_login_page,
    render_products_page,
    render_reports_page,
    render_users_page,
)
from pos_admin.ui.session import (
    DEFAULT_PAGE,
    LOGIN_PAGE,
    current_page,
    current_user,
    get_session_id,
    get_token_store,
    init_session_state,
    navigate,
)
from pos_admin.ui.styles import apply_styles

logger = logging.getLogger(__name__)

PAGE_RENDERERS = {
    "dashboard": render_dashboard_page,
    "products": render_products_page,
    "categories": render_categories_page,
    "users": render_users_page,
    "reports": render_reports_page,
}


@st.cache_resource(show_spinner=False)
def _setup_logging() -> bool:
    configure_logging(environment="development" if get_settings().debug_mode else "production")
    return True


def guard_page(page: str, user: Optional[User]) -> str:
    """
    Page to show for this rerun.

    Signed-in users are sent from login to the dashboard. Everyone else is
    sent to login, and a stored session whose role is no longer allowed is
    cleared.
    """
    if page == LOGIN_PAGE:
        return DEFAULT_PAGE if is_allowed(user) else LOGIN_PAGE
    if is_allowed(user):
        return page
    if user is not None:
        logger.warning("Role %s may not use the portal; signing out %s", user.role.value, user.email)
        get_token_store().clear()
    return LOGIN_PAGE


def main() -> None:
    settings = get_settings()
    st.set_page_config(
        page_title=settings.site_name,
        page_icon="🏪",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    _setup_logging()
    apply_styles()
    init_session_state()

    page = current_page()
    user = current_user()

    with LogContextManager(request_id=get_session_id(), user_email=user.email if user else None, page=page):
        target = guard_page(page, user)
        if target != page:
            navigate(target)

        if page == LOGIN_PAGE:
            render_login_page()
            return

        render_sidebar()
        render_header(user)
        PAGE_RENDERERS[page]()


if __name__ == "__main__":
    main()
