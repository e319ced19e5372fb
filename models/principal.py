from __future__ import annotations

from typing import Literal, Union, get_args

from pydantic import BaseModel, ConfigDict


Role = Literal["student", "company", "admin"]
ROLES: tuple[str, ...] = get_args(Role)


class Principal(BaseModel):
    """Authenticated identity derived from a verified token; never mutated."""

    user_id: str
    role: Role
    email: str | None = None

    model_config = ConfigDict(frozen=True)


class Anonymous(BaseModel):
    """No credential was presented."""

    model_config = ConfigDict(frozen=True)


class InvalidCredential(BaseModel):
    """A credential was presented but failed verification (bad signature, expired, malformed)."""

    reason: str

    model_config = ConfigDict(frozen=True)


ANONYMOUS = Anonymous()

Viewer = Union[Principal, Anonymous, InvalidCredential]
