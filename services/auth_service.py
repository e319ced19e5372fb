from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import sqlite3
from typing import Optional

from config.settings import Settings, get_settings
from data_validator import DataValidator
from db.repos.users_repo import UsersRepo
from models.principal import Viewer
from models.user_record import AuthResult, UserRecord
from ports.identity import AuthenticatorPort
from ports.repos import UsersRepoPort
from services.errors import InvalidCredentials, NotFound, ValidationFailed
from services.identity import TokenAuthenticator, require_principal
from utils.logging_setup import audit_extra


# =============================================================================
# Password hashing (PBKDF2-SHA256)
# =============================================================================


def hash_password(password: str, iterations: int = 100_000) -> str:
    """Hash a password using PBKDF2-SHA256 with a random salt."""
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return f"pbkdf2:sha256:{iterations}${salt}${dk.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash; malformed hashes never match."""
    if not password_hash.startswith("pbkdf2:sha256:"):
        return False
    parts = password_hash.split("$")
    if len(parts) != 3:
        return False
    header, salt, stored_hash = parts
    try:
        iterations = int(header.split(":")[2])
    except (IndexError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return hmac.compare_digest(dk.hex(), stored_hash)


# =============================================================================
# Accounts
# =============================================================================


class AuthService:
    def __init__(
        self,
        users: UsersRepoPort,
        authenticator: AuthenticatorPort,
        password_iterations: int = 100_000,
        validator: Optional[DataValidator] = None,
    ) -> None:
        self.users = users
        self.authenticator = authenticator
        self.password_iterations = password_iterations
        self.validator = validator or DataValidator()

    @classmethod
    def from_connection(cls, conn: sqlite3.Connection, settings: Optional[Settings] = None) -> "AuthService":
        settings = settings or get_settings()
        return cls(
            UsersRepo(conn),
            TokenAuthenticator.from_settings(settings),
            password_iterations=settings.password_hash_iterations,
        )

    def register(self, email: str, password: str, name: str, role: str) -> AuthResult:
        errors = self.validator.validate_registration(
            {"email": email, "password": password, "name": name, "role": role}
        )
        if errors:
            raise ValidationFailed(errors)
        user = self.users.create(
            email=email.strip().lower(),
            password_hash=hash_password(password, self.password_iterations),
            name=name.strip(),
            role=role,
        )
        logging.info(f"Registered user {user.user_id}", extra=audit_extra("auth.register", "ok", viewer=user.user_id))
        return AuthResult(token=self._issue(user), user=user)

    def login(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            raise ValidationFailed(["Email and password are required"])
        user = self.users.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            logging.info("Login failed", extra=audit_extra("auth.login_failed", "denied"))
            raise InvalidCredentials()
        return AuthResult(token=self._issue(user), user=user)

    def me(self, viewer: Viewer) -> UserRecord:
        principal = require_principal(viewer)
        user = self.users.get(principal.user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def _issue(self, user: UserRecord) -> str:
        return self.authenticator.issue(user.user_id, user.role, user.email)
