from __future__ import annotations

import itertools
import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.contact_service'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    from config.settings import get_settings

    monkeypatch.setenv("RUN_ENV", "test")
    # Fast hashing keeps account tests quick
    monkeypatch.setenv("PASSWORD_HASH_ITERATIONS", "1000")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "directory.db")


@pytest.fixture
def conn(db_path):
    from db.connection import open_directory

    c = open_directory(db_path)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def make_user(conn):
    """Create an account row and return the Principal a verified token would yield."""
    from db.repos.users_repo import UsersRepo
    from models.principal import Principal

    repo = UsersRepo(conn)
    seq = itertools.count(1)

    def _make(role: str, email: str | None = None) -> Principal:
        n = next(seq)
        user = repo.create(
            email=email or f"{role}{n}@example.com",
            password_hash="pbkdf2:sha256:1$x$y",
            name=f"{role.title()} {n}",
            role=role,
        )
        return Principal(user_id=user.user_id, role=user.role, email=user.email)

    return _make


@pytest.fixture
def make_developer(conn, make_user):
    """Create a developer profile owned by ``owner`` (a fresh student by default)."""
    from db.repos.developers_repo import DevelopersRepo
    from models.developer_record import DeveloperDraft

    repo = DevelopersRepo(conn)
    seq = itertools.count(1)

    def _make(owner=None, **overrides):
        owner = owner or make_user("student")
        n = next(seq)
        fields = {
            "first_name": f"Dev{n}",
            "last_name": "Example",
            "work_type": "remote",
            "field": "backend",
            "email": f"dev{n}@example.com",
            "github": f"https://github.com/dev{n}",
            "linkedin": f"https://linkedin.com/in/dev{n}",
        }
        fields.update(overrides)
        return repo.create(owner.user_id, DeveloperDraft(**fields))

    return _make
