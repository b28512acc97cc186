"""Pydantic schemas for registration, login and the current account."""

from datetime import datetime

from pydantic import Field

from quizhub.auth.identity import Role
from quizhub.schemas.base import ApiModel


class RegisterRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    role: str = Field(..., min_length=1, description="OWNER or TAKER")


class LoginRequest(ApiModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(ApiModel):
    token: str
    type: str = "Bearer"
    id: int
    email: str
    name: str
    role: Role
    message: str


class AccountRead(ApiModel):
    id: int
    email: str
    name: str
    role: Role
    is_active: bool
    created_at: datetime
