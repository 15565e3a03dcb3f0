# =============================================================================
# tests/unit/test_authentication.py
# Unit Tests for Supabase Auth wrapper and session helpers
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def auth_module(mock_streamlit, monkeypatch):
    """Authentication module bound to the mocked Streamlit"""
    from madrasa_core.auth import authentication

    monkeypatch.setattr(authentication, "st", mock_streamlit)
    return authentication


def signed_in_client(mock_supabase, user_id="u1", email="teacher@madrasa.pk"):
    """Supabase mock whose sign-in succeeds and whose tables return a profile and roles"""
    mock_supabase.auth.sign_in_with_password.return_value = SimpleNamespace(
        user=SimpleNamespace(id=user_id, email=email),
        session=SimpleNamespace(access_token="token-1"),
    )

    profiles = MagicMock()
    profiles.select.return_value.eq.return_value.execute.return_value.data = [
        {"id": user_id, "full_name": "Qari Ahmad", "madrasa_name": "Jamia Noor"}
    ]
    roles = MagicMock()
    roles.select.return_value.eq.return_value.execute.return_value.data = [
        {"role": "teacher"}, {"role": "admin"}
    ]
    mock_supabase.table.side_effect = lambda name: {"profiles": profiles, "user_roles": roles}[name]
    return mock_supabase


class TestPrimaryRole:
    """Most privileged role wins"""

    def test_priority(self):
        from madrasa_core.auth import primary_role

        assert primary_role(["parent", "teacher"]) == "teacher"
        assert primary_role(["staff", "admin"]) == "admin"
        assert primary_role([]) is None

    def test_session_properties(self):
        from madrasa_core.auth import AuthSession

        session = AuthSession("u1", "a@b.c", roles=["teacher"])

        assert session.role == "teacher"
        assert not session.is_admin


class TestAuthService:
    """Supabase Auth calls"""

    def test_sign_in_loads_profile_and_roles(self, mock_supabase):
        from madrasa_core.auth import AuthService

        client = signed_in_client(mock_supabase)

        session = AuthService(client).sign_in("  Teacher@Madrasa.PK ", "secret")

        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "teacher@madrasa.pk", "password": "secret"}
        )
        assert session.user_id == "u1"
        assert session.name == "Qari Ahmad"
        assert session.madrasa_name == "Jamia Noor"
        assert session.role == "admin"
        assert session.access_token == "token-1"

    def test_missing_password(self, mock_supabase):
        from madrasa_core.auth import AuthService
        from madrasa_core.errors import AuthenticationError

        with pytest.raises(AuthenticationError):
            AuthService(mock_supabase).sign_in("a@b.c", "")
        mock_supabase.auth.sign_in_with_password.assert_not_called()

    def test_wrong_credentials(self, mock_supabase):
        from madrasa_core.auth import AuthService
        from madrasa_core.errors import AuthenticationError

        mock_supabase.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        with pytest.raises(AuthenticationError) as exc:
            AuthService(mock_supabase).sign_in("a@b.c", "wrong")

        assert exc.value.details["email"] == "a@b.c"

    def test_no_user_returned(self, mock_supabase):
        from madrasa_core.auth import AuthService
        from madrasa_core.errors import AuthenticationError

        mock_supabase.auth.sign_in_with_password.return_value = SimpleNamespace(user=None, session=None)

        with pytest.raises(AuthenticationError):
            AuthService(mock_supabase).sign_in("a@b.c", "pw")

    def test_profile_errors_are_soft(self, mock_supabase):
        from madrasa_core.auth import AuthService

        mock_supabase.table.side_effect = Exception("network down")
        service = AuthService(mock_supabase)

        assert service.load_profile("u1") == {}
        assert service.load_roles("u1") == []

    def test_update_profile_failure(self, mock_supabase):
        from madrasa_core.auth import AuthService
        from madrasa_core.errors import AuthenticationError

        mock_supabase.table.return_value.update.return_value.eq.return_value.execute.side_effect = Exception("RLS")

        with pytest.raises(AuthenticationError):
            AuthService(mock_supabase).update_profile("u1", {"full_name": "X"})

    def test_sign_out_failure_swallowed(self, mock_supabase):
        from madrasa_core.auth import AuthService

        mock_supabase.auth.sign_out.side_effect = Exception("offline")

        AuthService(mock_supabase).sign_out()


class TestSignUp:
    """New madrasa accounts and the madrasa list for join requests"""

    def test_sign_up_sends_metadata(self, mock_supabase):
        from madrasa_core.auth import AuthService

        mock_supabase.auth.sign_up.return_value = SimpleNamespace(
            user=SimpleNamespace(id="u9", email="admin@noor.pk"), session=None
        )

        session = AuthService(mock_supabase).sign_up(" Admin@Noor.pk", "secret1", "Mufti Saad", "Jamia Noor")

        mock_supabase.auth.sign_up.assert_called_once_with({
            "email": "admin@noor.pk",
            "password": "secret1",
            "options": {"data": {"full_name": "Mufti Saad", "madrasa_name": "Jamia Noor"}},
        })
        # E-mail confirmation pending
        assert session is None

    def test_sign_up_with_session_signs_in(self, mock_supabase):
        from madrasa_core.auth import AuthService

        mock_supabase.auth.sign_up.return_value = SimpleNamespace(
            user=SimpleNamespace(id="u9", email="admin@noor.pk"),
            session=SimpleNamespace(access_token="token-9"),
        )
        mock_supabase.table.return_value.select.return_value.eq.return_value.execute.return_value.data = []

        session = AuthService(mock_supabase).sign_up("admin@noor.pk", "secret1", "Mufti Saad", "Jamia Noor")

        assert session.user_id == "u9"
        assert session.madrasa_name == "Jamia Noor"
        assert session.access_token == "token-9"

    def test_short_password_rejected_locally(self, mock_supabase):
        from madrasa_core.auth import AuthService
        from madrasa_core.errors import AuthenticationError

        with pytest.raises(AuthenticationError) as exc:
            AuthService(mock_supabase).sign_up("a@b.c", "12345", "Name", "Madrasa")

        assert exc.value.details["reason"] == "password_short"
        mock_supabase.auth.sign_up.assert_not_called()

    def test_missing_madrasa_rejected(self, mock_supabase):
        from madrasa_core.auth import AuthService
        from madrasa_core.errors import AuthenticationError

        with pytest.raises(AuthenticationError):
            AuthService(mock_supabase).sign_up("a@b.c", "secret1", "Name", "  ")
        mock_supabase.auth.sign_up.assert_not_called()

    def test_sign_up_failure_wrapped(self, mock_supabase):
        from madrasa_core.auth import AuthService
        from madrasa_core.errors import AuthenticationError

        mock_supabase.auth.sign_up.side_effect = Exception("User already registered")

        with pytest.raises(AuthenticationError) as exc:
            AuthService(mock_supabase).sign_up("a@b.c", "secret1", "Name", "Madrasa")

        assert "already registered" in exc.value.message

    def test_list_madrasas_distinct_and_sorted(self, mock_supabase):
        from madrasa_core.auth import AuthService

        mock_supabase.table.return_value.select.return_value.execute.return_value.data = [
            {"madrasa_name": "Jamia Noor"},
            {"madrasa_name": "Darul Uloom"},
            {"madrasa_name": "Jamia Noor "},
            {"madrasa_name": None},
        ]

        assert AuthService(mock_supabase).list_madrasas() == ["Darul Uloom", "Jamia Noor"]
        mock_supabase.table.assert_called_with("profiles")

    def test_list_madrasas_offline_is_empty(self, mock_supabase):
        from madrasa_core.auth import AuthService

        mock_supabase.table.side_effect = Exception("network down")

        assert AuthService(mock_supabase).list_madrasas() == []


class TestSessionHelpers:
    """Signed-in state kept in st.session_state"""

    def test_login_and_logout(self, auth_module, mock_streamlit):
        session = auth_module.AuthSession("u1", "a@b.c", name="Ahmad", roles=["admin"], madrasa_name="Jamia")

        auth_module.login_user(session)

        assert auth_module.check_authentication()
        assert auth_module.check_admin_access()
        assert auth_module.get_user_id() == "u1"
        assert auth_module.get_user_role() == "admin"
        assert auth_module.get_madrasa_name() == "Jamia"

        auth_module.logout_user()

        assert not auth_module.check_authentication()
        assert auth_module.get_user_id() is None

    def test_non_admin(self, auth_module):
        auth_module.login_user(auth_module.AuthSession("u2", "p@b.c", roles=["parent"]))

        assert auth_module.check_authentication()
        assert not auth_module.check_admin_access()

    def test_local_mode_is_admin(self, auth_module, mock_streamlit):
        auth_module.login_local_user()

        assert auth_module.check_admin_access()
        assert mock_streamlit.session_state["local_mode"] is True
        assert auth_module.get_user_id() is None

    def test_initialize_session_state(self, auth_module, mock_streamlit):
        auth_module.initialize_session_state()

        assert mock_streamlit.session_state["authenticated"] is False
        assert mock_streamlit.session_state["roles"] == []


class TestPageProtection:
    """require_authentication / require_admin_access"""

    def test_local_mode_signs_in_automatically(self, auth_module, mock_streamlit, monkeypatch):
        from madrasa_core.config import settings as settings_module
        from madrasa_core.config.settings import Settings

        monkeypatch.setattr(settings_module, "get_settings", lambda: Settings())

        auth_module.require_authentication("en")

        assert auth_module.check_authentication()
        mock_streamlit.stop.assert_not_called()

    def test_remote_mode_stops_page(self, auth_module, mock_streamlit, monkeypatch):
        from madrasa_core.config import settings as settings_module
        from madrasa_core.config.settings import Settings, SupabaseSettings

        configured = Settings(supabase=SupabaseSettings(url="https://x.supabase.co", key="anon"))
        monkeypatch.setattr(settings_module, "get_settings", lambda: configured)

        auth_module.require_authentication("en")

        mock_streamlit.warning.assert_called_once()
        mock_streamlit.stop.assert_called_once()

    def test_admin_required(self, auth_module, mock_streamlit):
        auth_module.login_user(auth_module.AuthSession("u2", "p@b.c", roles=["teacher"]))

        auth_module.require_admin_access("en")

        mock_streamlit.error.assert_called_once()
        mock_streamlit.stop.assert_called_once()
