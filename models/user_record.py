from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from models.principal import Role


class UserRecord(BaseModel):
    """App/DB record shape for an account."""

    user_id: str
    email: str
    name: str
    role: Role
    created_at: str
    password_hash: str = Field(default="", exclude=True, repr=False)

    model_config = ConfigDict(frozen=True, extra="ignore")


class AuthResult(BaseModel):
    token: str
    user: UserRecord
