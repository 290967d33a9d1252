from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from ..core.roles import ROLE_ADMIN, WRITE_ROLES
from ..core.security import decode_token
from ..db.session import get_db
from ..middlewares import principal_ctx_var
from ..models.user import User


def _unauthorized(detail: str = "Access denied. No token provided.") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer access token to an active ``User``."""

    scheme, credentials = get_authorization_scheme_param(authorization)
    if not authorization or scheme.lower() != "bearer" or not credentials:
        raise _unauthorized()
    try:
        payload = decode_token(credentials, verify_type="access")
    except ValueError as exc:
        raise _unauthorized("Invalid token.") from exc

    user = db.get(User, payload.user_id)
    if not user or not user.is_active:
        raise _unauthorized("Invalid token or user not active.")
    _set_principal(request, f"user:{user.username}")
    request.state.token_payload = payload
    return user


def require_roles(*roles: str) -> Callable[..., User]:
    allowed = frozenset(roles)

    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. Insufficient permissions.")
        return user

    return dependency


require_writer = require_roles(*WRITE_ROLES)
require_admin = require_roles(ROLE_ADMIN)
