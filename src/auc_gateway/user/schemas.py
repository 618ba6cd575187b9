"""Request/response bodies for the auth endpoints."""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.auc_gateway.user.db_models import UserModel

_PASSWORD_RULES = (
    (r"[A-Z]", "Password must contain at least one uppercase letter"),
    (r"[a-z]", "Password must contain at least one lowercase letter"),
    (r"\d", "Password must contain at least one digit"),
)


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        for pattern, message in _PASSWORD_RULES:
            if not re.search(pattern, v):
                raise ValueError(message)
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UserInfo(BaseModel):
    """Public identity of a bidder or seller."""

    user_id: str
    username: str
    email: str

    @classmethod
    def from_model(cls, user: UserModel) -> "UserInfo":
        return cls(user_id=str(user.id), username=user.username, email=user.email)


class RegisterResponse(UserInfo):
    created_at: str

    @classmethod
    def from_model(cls, user: UserModel) -> "RegisterResponse":
        return cls(
            user_id=str(user.id),
            username=user.username,
            email=user.email,
            created_at=user.created_at.isoformat(),
        )


class TokenPair(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


class LoginResponse(TokenPair):
    refresh_token: str
    user: UserInfo


class RefreshResponse(TokenPair):
    pass
