"""Authentication-related schemas."""
from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class LoginUser(BaseModel):
    id: int
    email: str
    username: str


class LoginResult(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: LoginUser
