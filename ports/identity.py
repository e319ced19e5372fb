from __future__ import annotations

from typing import Optional, Protocol

from models.principal import Viewer


class AuthenticatorPort(Protocol):
    def issue(self, user_id: str, role: str, email: Optional[str] = None) -> str:
        ...

    def resolve_principal(self, credential: Optional[str]) -> Viewer:
        ...
