from __future__ import annotations

from typing import Any, Dict, Optional


class DirectoryError(Exception):
    """Base error carrying the client-facing code and status."""

    code: str = "internal_error"
    status_code: int = 500
    category: str = "internal"
    retryable: bool = False

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)

    def details(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": False,
            "error": self.code,
            "status": self.status_code,
            "message": self.message,
            "retryable": self.retryable,
        }
        payload.update(self.details())
        return payload


class ContactError(DirectoryError):
    """Raised by the contact action and quota reads."""


# --- Authorization errors: terminal, never retried ---

class AuthenticationRequired(ContactError):
    """Missing or invalid credential."""

    code = "authentication_required"
    status_code = 401
    category = "authorization"


class RoleNotPermitted(ContactError):
    """The principal's role may not perform this action."""

    code = "role_not_permitted"
    status_code = 403
    category = "authorization"


class SelfViewNotAllowed(ContactError):
    """Viewers cannot use the contact action on their own profile."""

    code = "self_view_not_allowed"
    status_code = 400
    category = "authorization"


# --- Resource errors ---

class NotFound(ContactError):
    """Developer not found."""

    code = "not_found"
    status_code = 404
    category = "resource"


# --- Capacity errors: terminal until the next UTC day ---

class QuotaExceeded(ContactError):
    """Daily contact limit reached. Try again tomorrow."""

    code = "quota_exceeded"
    status_code = 429
    category = "capacity"

    def __init__(self, limit: int, day: str, resets_at: str, message: Optional[str] = None) -> None:
        self.limit = limit
        self.day = day
        self.resets_at = resets_at
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        return {"remaining": 0, "limit": self.limit, "day": self.day, "resetsAt": self.resets_at}


# --- Transient infrastructure errors: the only retryable class ---

class LedgerUnavailable(ContactError):
    """Contact ledger storage is temporarily unavailable."""

    code = "ledger_unavailable"
    status_code = 503
    category = "transient"
    retryable = True


# --- Accounts and profile creation ---

class ValidationFailed(DirectoryError):
    """Invalid input."""

    code = "validation_failed"
    status_code = 400
    category = "validation"

    def __init__(self, errors: list[str], message: Optional[str] = None) -> None:
        self.errors = list(errors)
        super().__init__(message or "; ".join(self.errors) or None)

    def details(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class EmailAlreadyRegistered(DirectoryError):
    """This email address is already in use."""

    code = "email_already_registered"
    status_code = 400
    category = "validation"


class InvalidCredentials(DirectoryError):
    """Invalid email or password."""

    code = "invalid_credentials"
    status_code = 401
    category = "authorization"


class ProfileAlreadyExists(DirectoryError):
    """A profile already exists for this user."""

    code = "profile_already_exists"
    status_code = 400
    category = "validation"
