from datetime import datetime

from pydantic import BaseModel, Field

from app.models.enums import UserRole


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=6, max_length=72)
    full_name: str | None = Field(default=None, max_length=100, alias="fullName")

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenBundle(BaseModel):
    token: str
    expiration: datetime
    username: str
    role: UserRole


class TokenClaims(BaseModel):
    user_id: int
    username: str
    role: UserRole
    token_id: str
    expires_at: datetime
