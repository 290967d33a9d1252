from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..core.roles import ROLE_CHOICES, ROLE_VIEWER, choice_pattern
from .common import Email, blank_to_none, text_field

ROLE_PATTERN = choice_pattern(ROLE_CHOICES)

Username = text_field(3, 50, pattern=r"^[A-Za-z0-9]+$")
PersonName = text_field(2, 50)
Password = text_field(6, 255)


class UserSummary(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: str

    model_config = {"from_attributes": True}


class UserOut(UserSummary):
    email: str
    role: str
    is_active: bool
    last_login: Optional[str] = None
    avatar: Optional[str] = None
    created_at: str


class UserCreate(BaseModel):
    username: Username
    email: Email
    password: Password
    first_name: PersonName
    last_name: PersonName
    role: str = Field(default=ROLE_VIEWER, pattern=ROLE_PATTERN)


class UserUpdate(BaseModel):
    email: Optional[Email] = None
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    role: Optional[str] = Field(default=None, pattern=ROLE_PATTERN)
    is_active: Optional[bool] = None
    password: Optional[Password] = None
    avatar: Optional[str] = None

    @field_validator("email", "first_name", "last_name", "password", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: object) -> object:
        return blank_to_none(value)
