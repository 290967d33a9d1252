"""Request dependencies shared by the API routers."""

from .auth import get_current_user, require_admin, require_roles, require_writer

__all__ = ["get_current_user", "require_admin", "require_roles", "require_writer"]
