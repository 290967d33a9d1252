from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.errors import as_http_error
from ..crud.users import create_user, get_user, list_users, update_user
from ..db.session import get_db
from ..deps.auth import require_admin
from ..models.user import User
from ..schemas.user import UserCreate, UserOut, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[UserOut])
def api_list_users(db: Session = Depends(get_db)):
    return list_users(db)


@router.get("/{user_id}", response_model=UserOut)
def api_get_user(user_id: int, db: Session = Depends(get_db)):
    try:
        return get_user(db, user_id)
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def api_create_user(payload: UserCreate, db: Session = Depends(get_db)):
    try:
        return create_user(db, payload.model_dump())
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.put("/{user_id}", response_model=UserOut)
def api_update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        user = get_user(db, user_id)
        return update_user(db, user, payload.model_dump(exclude_unset=True), acting_user=admin)
    except ValueError as exc:
        raise as_http_error(exc) from exc
