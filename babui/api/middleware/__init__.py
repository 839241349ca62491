from babui.api.middleware.auth import AuthenticatedUser, get_current_user, get_optional_user

__all__ = ["AuthenticatedUser", "get_current_user", "get_optional_user"]
