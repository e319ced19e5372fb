from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from config.settings import Settings, get_settings
from models.principal import ANONYMOUS, ROLES, InvalidCredential, Principal, Viewer
from services.errors import AuthenticationRequired


def extract_token(credential: Optional[str]) -> Optional[str]:
    """Accept a raw token or an Authorization header value ("Bearer <token>")."""
    if credential is None:
        return None
    text = credential.strip()
    if not text:
        return None
    parts = text.split()
    if len(parts) == 1:
        # A lone scheme with no token is the same as no credential
        return None if parts[0].lower() == "bearer" else parts[0]
    if parts[0].lower() == "bearer":
        return parts[1]
    return text


class TokenAuthenticator:
    """Issues and verifies HS256 JWTs carrying the principal's id and role."""

    def __init__(self, secret: str, expiry_days: int = 7, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.secret = secret
        self.expiry_days = expiry_days
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TokenAuthenticator":
        settings = settings or get_settings()
        return cls(settings.jwt_secret, settings.jwt_expiry_days, settings.jwt_algorithm)

    def issue(
        self,
        user_id: str,
        role: str,
        email: Optional[str] = None,
        expires_in: Optional[timedelta] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        expiry = now + (expires_in if expires_in is not None else timedelta(days=self.expiry_days))
        payload = {
            "sub": user_id,
            "role": role,
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int(expiry.timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def resolve_principal(self, credential: Optional[str]) -> Viewer:
        """Map a credential to Principal, Anonymous (none given) or InvalidCredential."""
        token = extract_token(credential)
        if token is None:
            return ANONYMOUS
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logging.debug("JWT expired")
            return InvalidCredential(reason="expired")
        except jwt.InvalidTokenError as e:
            logging.debug(f"Invalid JWT: {e}")
            return InvalidCredential(reason="invalid")

        role = payload.get("role")
        if role not in ROLES:
            return InvalidCredential(reason="unknown_role")
        return Principal(user_id=str(payload["sub"]), role=role, email=payload.get("email"))


def require_principal(viewer: Viewer) -> Principal:
    """Anonymous and invalid credentials fail before any role check runs."""
    if isinstance(viewer, Principal):
        return viewer
    if isinstance(viewer, InvalidCredential):
        raise AuthenticationRequired("Invalid or expired token")
    raise AuthenticationRequired("Access token required")
