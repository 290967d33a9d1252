from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import Email, blank_to_none
from .user import Password, PersonName, UserCreate, UserOut


class RegisterRequest(UserCreate):
    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "jdoe",
                "email": "jdoe@warehouse.com",
                "password": "s3cret!",
                "first_name": "John",
                "last_name": "Doe",
            }
        }
    }


class LoginRequest(BaseModel):
    # Either the username or the email address.
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username is required")
        return value

    model_config = {"json_schema_extra": {"example": {"username": "admin", "password": "admin123"}}}


class RefreshRequest(BaseModel):
    refresh_token: str


class AuthResponse(BaseModel):
    user: UserOut
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int

    model_config = {
        "json_schema_extra": {
            "example": {
                "user": {"id": 1, "username": "admin", "role": "admin"},
                "token": "<jwt>",
                "refresh_token": "<jwt>",
                "token_type": "bearer",
                "expires_in": 86400,
            }
        }
    }


class ProfileUpdate(BaseModel):
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    email: Optional[Email] = None

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: object) -> object:
        return blank_to_none(value)


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: Password
