from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from models.principal import ANONYMOUS, Anonymous, InvalidCredential, Principal
from services.errors import AuthenticationRequired
from services.identity import TokenAuthenticator, extract_token, require_principal


@pytest.fixture
def auth():
    return TokenAuthenticator("unit-test-secret-0123456789abcdef", expiry_days=7)


@pytest.mark.parametrize("credential", [None, "", "   ", "Bearer", "bearer  "])
def test_missing_credential_is_anonymous(auth, credential):
    assert isinstance(auth.resolve_principal(credential), Anonymous)


def test_extract_token_accepts_header_or_raw_token():
    assert extract_token("Bearer abc.def.ghi") == "abc.def.ghi"
    assert extract_token("abc.def.ghi") == "abc.def.ghi"
    assert extract_token(None) is None


def test_valid_token_resolves_principal(auth):
    token = auth.issue("u-1", "company", "hr@acme.example")
    for credential in (token, f"Bearer {token}"):
        principal = auth.resolve_principal(credential)
        assert principal == Principal(user_id="u-1", role="company", email="hr@acme.example")


def test_expired_token_is_invalid(auth):
    token = auth.issue("u-1", "student", expires_in=timedelta(seconds=-30))
    resolved = auth.resolve_principal(token)
    assert resolved == InvalidCredential(reason="expired")


def test_foreign_signature_is_invalid(auth):
    other = TokenAuthenticator("another-secret-0123456789abcdef012")
    resolved = auth.resolve_principal(other.issue("u-1", "admin"))
    assert resolved == InvalidCredential(reason="invalid")


def test_garbage_token_is_invalid(auth):
    assert auth.resolve_principal("Bearer not-a-jwt") == InvalidCredential(reason="invalid")


def test_unknown_role_is_invalid(auth):
    token = auth.issue("u-1", "superuser")
    assert auth.resolve_principal(token) == InvalidCredential(reason="unknown_role")


def test_token_without_expiry_is_invalid(auth):
    token = jwt.encode({"sub": "u-1", "role": "admin"}, "unit-test-secret-0123456789abcdef", algorithm="HS256")
    assert isinstance(auth.resolve_principal(token), InvalidCredential)


def test_require_principal():
    principal = Principal(user_id="u", role="student")
    assert require_principal(principal) is principal
    with pytest.raises(AuthenticationRequired):
        require_principal(ANONYMOUS)
    with pytest.raises(AuthenticationRequired):
        require_principal(InvalidCredential(reason="expired"))


def test_from_settings_uses_configured_secret(monkeypatch):
    from config.settings import get_settings

    monkeypatch.setenv("JWT_SECRET", "configured-secret-0123456789abcdef")
    get_settings.cache_clear()
    token = TokenAuthenticator.from_settings().issue("u-9", "admin")
    assert jwt.decode(token, "configured-secret-0123456789abcdef", algorithms=["HS256"])["sub"] == "u-9"
