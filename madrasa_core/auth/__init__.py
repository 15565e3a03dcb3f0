from .authentication import (
    AuthService,
    AuthSession,
    primary_role,
    login_user,
    login_local_user,
    logout_user,
    check_authentication,
    check_admin_access,
    get_user_role,
    get_user_id,
    get_madrasa_name,
    initialize_session_state,
    require_authentication,
    require_admin_access,
)

__all__ = [
    "AuthService",
    "AuthSession",
    "primary_role",
    "login_user",
    "login_local_user",
    "logout_user",
    "check_authentication",
    "check_admin_access",
    "get_user_role",
    "get_user_id",
    "get_madrasa_name",
    "initialize_session_state",
    "require_authentication",
    "require_admin_access",
]
