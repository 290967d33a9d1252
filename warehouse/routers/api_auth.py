from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..core.errors import as_http_error
from ..core.security import decode_token, issue_token_pair, verify_password
from ..crud.users import change_password, create_user, find_by_login, record_login, update_user
from ..db.session import get_db
from ..deps.auth import get_current_user
from ..models.user import User
from ..schemas.auth import AuthResponse, LoginRequest, PasswordChange, ProfileUpdate, RefreshRequest, RegisterRequest
from ..schemas.common import MessageOut
from ..schemas.user import UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    pair = issue_token_pair(user.id, username=user.username, role=user.role)
    return AuthResponse(
        user=UserOut.model_validate(user),
        token=pair.access_token,
        refresh_token=pair.refresh_token,
        token_type=pair.token_type,
        expires_in=pair.expires_in,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, summary="Create an account")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    try:
        user = create_user(db, payload.model_dump())
    except ValueError as exc:
        raise as_http_error(exc) from exc
    logger.info("user.registered", extra={"extra_data": {"user_id": user.id, "role": user.role}})
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse, summary="Sign in with username or email")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = find_by_login(db, payload.username)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials or inactive account")
    if not verify_password(payload.password, user.password_hash):
        logger.warning("auth.login_failed", extra={"extra_data": {"user_id": user.id}})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    user = record_login(db, user)
    return _auth_response(user)


@router.post("/refresh", response_model=AuthResponse, summary="Exchange a refresh token for a new pair")
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)):
    try:
        token = decode_token(payload.refresh_token, verify_type="refresh")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    user = db.get(User, token.user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token or user not active.")
    return _auth_response(user)


@router.get("/me", response_model=UserOut)
def read_profile(user: User = Depends(get_current_user)):
    return user


@router.put("/me", response_model=UserOut)
def update_profile(payload: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return update_user(db, user, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.put("/change-password", response_model=MessageOut)
def update_password(payload: PasswordChange, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        change_password(db, user, payload.current_password, payload.new_password)
    except ValueError as exc:
        raise as_http_error(exc) from exc
    return MessageOut(message="Password changed successfully")
