"""
Authentication module for Madrasa Manager.

Sign-in goes through Supabase Auth (e-mail + password). The signed-in user,
their madrasa (from `profiles`) and their role (from `user_roles`) are kept in
st.session_state, so pages keep working after the connection drops.

Without Supabase credentials the app runs in local mode: every session is
treated as an administrator of the local data.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import streamlit as st

from madrasa_core.data.models import Role
from madrasa_core.errors.exceptions import AuthenticationError
from madrasa_core.logging import get_logger

logger = get_logger(__name__)

# Highest privilege first
ROLE_PRIORITY = [Role.ADMIN.value, Role.TEACHER.value, Role.STAFF.value, Role.PARENT.value]

MIN_PASSWORD_LENGTH = 6  # Supabase Auth default

SESSION_KEYS = [
    "authenticated",
    "user_id",
    "email",
    "name",
    "role",
    "roles",
    "madrasa_name",
    "access_token",
    "local_mode",
]


@dataclass
class AuthSession:
    """A signed-in user."""
    user_id: str
    email: str
    name: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    madrasa_name: Optional[str] = None
    access_token: Optional[str] = None

    @property
    def role(self) -> Optional[str]:
        return primary_role(self.roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN.value in self.roles


def primary_role(roles: List[str]) -> Optional[str]:
    """The most privileged of roles, or None."""
    for role in ROLE_PRIORITY:
        if role in roles:
            return role
    return None


# ==================== SUPABASE AUTH ====================

class AuthService:
    """
    Supabase Auth wrapper.

    Usage:
        auth = AuthService(get_supabase_client())
        session = auth.sign_in(email, password)
        login_user(session)
    """

    def __init__(self, client):
        self.client = client

    def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Raises:
            AuthenticationError: wrong credentials or auth service unreachable
        """
        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthenticationError("Email and password are required", email=email)

        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.warning(f"Sign-in failed for {email}: {e}")
            raise AuthenticationError(f"Sign-in failed: {e}", email=email) from e

        user = getattr(response, "user", None)
        if user is None:
            raise AuthenticationError("Sign-in failed: no user returned", email=email)

        session = getattr(response, "session", None)
        user_id = str(user.id)
        profile = self.load_profile(user_id)
        auth_session = AuthSession(
            user_id=user_id,
            email=user.email or email,
            name=profile.get("full_name"),
            roles=self.load_roles(user_id),
            madrasa_name=profile.get("madrasa_name"),
            access_token=getattr(session, "access_token", None),
        )
        logger.info(f"Signed in {auth_session.email} (role={auth_session.role})")
        return auth_session

    def sign_up(self, email: str, password: str, full_name: str, madrasa_name: str) -> Optional[AuthSession]:
        """
        Create an account for a new madrasa administrator.

        full_name and madrasa_name travel as user metadata; the database
        trigger copies them into `profiles`.

        Returns:
            The signed-in session when the project auto-confirms e-mails,
            None when the user still has to confirm by e-mail

        Raises:
            AuthenticationError: missing fields, short password or rejected sign-up
        """
        email = (email or "").strip().lower()
        full_name = (full_name or "").strip()
        madrasa_name = (madrasa_name or "").strip()
        if not (email and password and full_name and madrasa_name):
            raise AuthenticationError("Email, password, name and madrasa are required", email=email)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthenticationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                email=email,
                details={"reason": "password_short"},
            )

        try:
            response = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"full_name": full_name, "madrasa_name": madrasa_name}},
            })
        except Exception as e:
            logger.warning(f"Sign-up failed for {email}: {e}")
            raise AuthenticationError(f"Sign-up failed: {e}", email=email) from e

        user = getattr(response, "user", None)
        if user is None:
            raise AuthenticationError("Sign-up failed: no user returned", email=email)
        logger.info(f"Created account {email} for {madrasa_name}")

        session = getattr(response, "session", None)
        if session is None:
            return None
        return AuthSession(
            user_id=str(user.id),
            email=user.email or email,
            name=full_name,
            roles=self.load_roles(str(user.id)),
            madrasa_name=madrasa_name,
            access_token=getattr(session, "access_token", None),
        )

    def list_madrasas(self) -> List[str]:
        """Distinct madrasa names from `profiles`, for the join request form."""
        try:
            response = self.client.table("profiles").select("madrasa_name").execute()
        except Exception as e:
            logger.warning(f"Could not load madrasa names: {e}")
            return []
        names = {str(row["madrasa_name"]).strip() for row in (response.data or []) if row.get("madrasa_name")}
        return sorted(name for name in names if name)

    def load_profile(self, user_id: str) -> Dict[str, Any]:
        """Row of `profiles` for the user, {} when missing or unreadable."""
        try:
            response = self.client.table("profiles").select("*").eq("id", user_id).execute()
        except Exception as e:
            logger.warning(f"Could not load profile for {user_id}: {e}")
            return {}
        return dict(response.data[0]) if response.data else {}

    def load_roles(self, user_id: str) -> List[str]:
        try:
            response = self.client.table("user_roles").select("role").eq("user_id", user_id).execute()
        except Exception as e:
            logger.warning(f"Could not load roles for {user_id}: {e}")
            return []
        return [row["role"] for row in (response.data or []) if row.get("role")]

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.client.table("profiles").update(changes).eq("id", user_id).execute()
        except Exception as e:
            raise AuthenticationError(f"Could not update profile: {e}") from e
        return dict(response.data[0]) if response.data else dict(changes)

    def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except Exception as e:
            # Local session is cleared regardless
            logger.warning(f"Remote sign-out failed: {e}")


# ==================== SESSION HELPERS ====================

def login_user(session: AuthSession) -> None:
    """Store a signed-in user in session state."""
    st.session_state.authenticated = True
    st.session_state.user_id = session.user_id
    st.session_state.email = session.email
    st.session_state.name = session.name or session.email
    st.session_state.roles = list(session.roles)
    st.session_state.role = session.role
    st.session_state.madrasa_name = session.madrasa_name
    st.session_state.access_token = session.access_token
    st.session_state.local_mode = False


def login_local_user() -> None:
    """Local mode (no Supabase configured): act as administrator."""
    st.session_state.authenticated = True
    st.session_state.user_id = None
    st.session_state.email = None
    st.session_state.name = "Local Admin"
    st.session_state.roles = [Role.ADMIN.value]
    st.session_state.role = Role.ADMIN.value
    st.session_state.madrasa_name = st.session_state.get("madrasa_name")
    st.session_state.access_token = None
    st.session_state.local_mode = True


def check_authentication() -> bool:
    """
    Check if the current user is authenticated.

    Returns:
        bool: True if user is authenticated, False otherwise
    """
    return st.session_state.get("authenticated", False)


def check_admin_access() -> bool:
    """
    Check if the current user has admin privileges.

    Returns:
        bool: True if user is admin, False otherwise
    """
    if not check_authentication():
        return False

    return Role.ADMIN.value in (st.session_state.get("roles") or [])


def get_user_role() -> Optional[str]:
    if not check_authentication():
        return None
    return st.session_state.get("role")


def get_user_id() -> Optional[str]:
    if not check_authentication():
        return None
    return st.session_state.get("user_id")


def get_madrasa_name() -> Optional[str]:
    return st.session_state.get("madrasa_name")


def logout_user() -> None:
    """
    Logout the current user and clear session state.
    """
    for key in SESSION_KEYS:
        if key in st.session_state:
            del st.session_state[key]


def initialize_session_state() -> None:
    """
    Initialize session state variables for authentication.
    Call this at the start of your main app.
    """
    if "authenticated" not in st.session_state:
        st.session_state.authenticated = False
    for key in ("role", "user_id", "email", "name", "madrasa_name"):
        if key not in st.session_state:
            st.session_state[key] = None
    if "roles" not in st.session_state:
        st.session_state.roles = []


# ==================== PAGE PROTECTION ====================

def require_authentication(lang: Optional[str] = None) -> None:
    """
    Stop the page unless a user is signed in.

    In local mode the session is signed in automatically.
    """
    from madrasa_core.config.settings import get_settings
    from madrasa_core.i18n import t

    if check_authentication():
        return

    if not get_settings().supabase.is_configured:
        login_local_user()
        return

    lang = lang or st.session_state.get("language", "en")
    st.warning(t("auth.required", lang))
    st.page_link("Welcome.py", label=t("auth.sign_in", lang))
    st.stop()


def require_admin_access(lang: Optional[str] = None) -> None:
    """Stop the page unless the signed-in user is an administrator."""
    from madrasa_core.i18n import t

    require_authentication(lang)
    if not check_admin_access():
        lang = lang or st.session_state.get("language", "en")
        st.error(t("auth.admin_required", lang))
        st.stop()
