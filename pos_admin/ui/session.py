"""
Session state helpers for the Streamlit UI.
"""

from __future__ import annotations

import uuid
from typing import Optional

import streamlit as st

from pos_admin import auth
from pos_admin.api_client import ApiClient
from pos_admin.config import NAV_ITEMS
from pos_admin.logging_config import log_event
from pos_admin.models import LoginResult, User

LOGIN_PAGE = "login"
DEFAULT_PAGE = "dashboard"
PAGES = {LOGIN_PAGE} | {key for key, _label, _icon in NAV_ITEMS}

# Session keys that belong to one page visit
VIEW_STATE_PREFIXES = ("_custom_", "_pdf_")


def init_session_state() -> None:
    if "_session_id" not in st.session_state:
        st.session_state["_session_id"] = str(uuid.uuid4())
    if "_flash" not in st.session_state:
        st.session_state["_flash"] = None


def get_session_id() -> str:
    return st.session_state.get("_session_id", "default")


def get_token_store() -> auth.TokenStore:
    return auth.TokenStore(st.session_state)


def current_page() -> str:
    page = st.query_params.get("page", DEFAULT_PAGE)
    return page if page in PAGES else DEFAULT_PAGE


def clear_view_state() -> None:
    """Drop page-scoped state (custom report, prepared PDFs)."""
    for key in [k for k in st.session_state.keys() if str(k).startswith(VIEW_STATE_PREFIXES)]:
        del st.session_state[key]


def navigate(page: str) -> None:
    clear_view_state()
    st.query_params["page"] = page
    st.rerun()


def current_user() -> Optional[User]:
    return auth.restore_user(get_token_store())


def set_flash(message: str) -> None:
    """Message shown once on the next rerun (after a dialog closes)."""
    st.session_state["_flash"] = message


def pop_flash() -> Optional[str]:
    message = st.session_state.get("_flash")
    st.session_state["_flash"] = None
    return message


def _force_logout(status: int) -> None:
    get_token_store().clear()
    log_event("forced_logout", level="WARNING", status=status)
    set_flash("Sesi Anda telah berakhir. Silakan masuk kembali.")
    navigate(LOGIN_PAGE)


def get_client() -> ApiClient:
    """API client bound to this browser session's token."""
    store = get_token_store()
    return ApiClient(
        token_provider=lambda: store.token,
        on_unauthorized=_force_logout,
        is_login_page=lambda: current_page() == LOGIN_PAGE,
    )


def sign_in(result: LoginResult) -> None:
    auth.sign_in(get_token_store(), result)
    navigate(DEFAULT_PAGE)


def sign_out() -> None:
    auth.logout(get_token_store())
    navigate(LOGIN_PAGE)
