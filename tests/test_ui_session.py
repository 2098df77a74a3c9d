"""
Tests for pos_admin.ui.session and the page guard in pos_admin.ui.app.

Streamlit is replaced by a namespace holding plain dicts for session state
and query params, with ``rerun`` as a mock.

Covers:
- Navigation and page-scoped state
- Forced logout on 401/403 through the session-bound client
- Routing of signed-out, allowed and disallowed users
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from pos_admin import auth
from pos_admin.config import get_settings
from pos_admin.exceptions import AuthenticationError, PermissionDeniedError
from pos_admin.models import User
from pos_admin.ui import app as ui_app
from pos_admin.ui import session

from conftest import make_response, make_token


@pytest.fixture
def fake_st(monkeypatch):
    fake = SimpleNamespace(session_state={}, query_params={}, rerun=MagicMock())
    monkeypatch.setattr(session, "st", fake)
    session.init_session_state()
    return fake


def _signed_in(fake_st, user_data):
    user = User.model_validate(user_data)
    token = make_token(sub=str(user.id), email=user.email, role=user.role.value)
    auth.TokenStore(fake_st.session_state).save(token, user)
    return user


class TestNavigation:
    def test_current_page_defaults_to_dashboard(self, fake_st):
        assert session.current_page() == "dashboard"

        fake_st.query_params["page"] = "nowhere"
        assert session.current_page() == "dashboard"

        fake_st.query_params["page"] = "reports"
        assert session.current_page() == "reports"

    def test_navigate_drops_view_state(self, fake_st):
        fake_st.session_state.update(
            {"_custom_report": object(), "_custom_range": ("a", "b"), "_pdf_daily": b"%PDF", "keep": 1}
        )

        session.navigate("products")

        assert fake_st.query_params["page"] == "products"
        assert "_custom_report" not in fake_st.session_state
        assert "_custom_range" not in fake_st.session_state
        assert "_pdf_daily" not in fake_st.session_state
        assert fake_st.session_state["keep"] == 1
        fake_st.rerun.assert_called_once()

    def test_flash_is_shown_once(self, fake_st):
        session.set_flash("Kategori dihapus")

        assert session.pop_flash() == "Kategori dihapus"
        assert session.pop_flash() is None


class TestForcedLogout:
    def test_force_logout_clears_session_and_routes_to_login(self, fake_st, admin_user):
        _signed_in(fake_st, admin_user)
        fake_st.query_params["page"] = "users"

        session._force_logout(401)

        assert session.current_user() is None
        assert fake_st.query_params["page"] == "login"
        assert session.pop_flash() == "Sesi Anda telah berakhir. Silakan masuk kembali."
        fake_st.rerun.assert_called_once()

    @pytest.mark.parametrize(("status", "exc_type"), [(401, AuthenticationError), (403, PermissionDeniedError)])
    def test_rejected_token_logs_out(self, fake_st, http_session, admin_user, status, exc_type):
        _signed_in(fake_st, admin_user)
        fake_st.query_params["page"] = "products"
        client = session.get_client()
        client._session = http_session
        http_session.request.return_value = make_response(status, {"statusCode": status, "message": "Unauthorized"})

        with pytest.raises(exc_type):
            client.get("/menu")

        assert http_session.request.call_args.kwargs["headers"]["Authorization"].startswith("Bearer ")
        assert session.current_user() is None
        assert fake_st.query_params["page"] == "login"

    def test_failed_sign_in_stays_on_login(self, fake_st, http_session):
        fake_st.query_params["page"] = "login"
        client = session.get_client()
        client._session = http_session
        http_session.request.return_value = make_response(401, {"message": "Invalid credentials"})

        with pytest.raises(AuthenticationError):
            auth.login(client, "admin@pos.com", "wrong")

        fake_st.rerun.assert_not_called()
        assert session.pop_flash() is None


class TestGuardPage:
    def test_signed_out_user_goes_to_login(self, fake_st):
        assert ui_app.guard_page("reports", None) == "login"
        assert ui_app.guard_page("login", None) == "login"

    def test_admin_keeps_page_and_skips_login(self, fake_st, admin_user):
        user = _signed_in(fake_st, admin_user)

        assert ui_app.guard_page("reports", user) == "reports"
        assert ui_app.guard_page("login", user) == "dashboard"

    def test_disallowed_role_is_signed_out(self, fake_st, cashier_user):
        user = _signed_in(fake_st, cashier_user)

        assert ui_app.guard_page("products", user) == "login"
        assert session.current_user() is None

    def test_widened_roles_let_cashier_through(self, fake_st, monkeypatch, cashier_user):
        monkeypatch.setattr(get_settings(), "allowed_roles", {"ADMIN", "KASIR"})
        _signed_in(fake_st, cashier_user)
        user = session.current_user()

        assert ui_app.guard_page("products", user) == "products"
        assert session.current_user() is not None
