from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..core.errors import ConflictError, NotFoundError
from ..core.roles import ROLE_ADMIN, ROLE_VIEWER
from ..core.security import hash_password, verify_password
from ..core.timestamps import utcnow_iso
from ..models.user import User

UPDATABLE_FIELDS = ("email", "first_name", "last_name", "role", "is_active", "avatar")


def list_users(db: Session) -> list[User]:
    return db.execute(select(User).order_by(User.username)).scalars().all()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def find_by_login(db: Session, login: str) -> User | None:
    """Look a user up by username or, failing that, by email."""

    login = login.strip()
    stmt = select(User).where(or_(User.username == login, User.email == login.lower()))
    return db.execute(stmt).scalars().first()


def _ensure_unique(db: Session, *, username: str | None = None, email: str | None = None, exclude_id: int | None = None) -> None:
    clauses = []
    if username:
        clauses.append(User.username == username)
    if email:
        clauses.append(User.email == email)
    if not clauses:
        return
    stmt = select(User).where(or_(*clauses))
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    clash = db.execute(stmt).scalars().first()
    if not clash:
        return
    if username and clash.username == username:
        raise ConflictError("User with this username already exists")
    raise ConflictError("User with this email already exists")


def create_user(db: Session, payload: dict) -> User:
    data = payload.copy()
    _ensure_unique(db, username=data["username"], email=data["email"])
    now = utcnow_iso()
    user = User(
        username=data["username"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        first_name=data["first_name"],
        last_name=data["last_name"],
        role=data.get("role") or ROLE_VIEWER,
        is_active=data.get("is_active", True),
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, payload: dict, *, acting_user: User | None = None) -> User:
    """Apply a partial update. ``None`` values are ignored.

    When ``acting_user`` is the same admin being edited, demotion and
    deactivation are refused so the system keeps at least that admin.
    """

    data = {key: value for key, value in payload.items() if value is not None}
    if acting_user is not None and acting_user.id == user.id and user.role == ROLE_ADMIN:
        if data.get("role", ROLE_ADMIN) != ROLE_ADMIN:
            raise ConflictError("You cannot change your own role")
        if data.get("is_active") is False:
            raise ConflictError("You cannot deactivate your own account")
    if "email" in data and data["email"] != user.email:
        _ensure_unique(db, email=data["email"], exclude_id=user.id)

    for key in UPDATABLE_FIELDS:
        if key in data:
            setattr(user, key, data[key])
    if data.get("password"):
        user.password_hash = hash_password(data["password"])
    user.updated_at = utcnow_iso()
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> User:
    if not verify_password(current_password, user.password_hash):
        raise ValueError("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    user.updated_at = utcnow_iso()
    db.commit()
    db.refresh(user)
    return user


def record_login(db: Session, user: User) -> User:
    user.last_login = utcnow_iso()
    db.commit()
    db.refresh(user)
    return user
