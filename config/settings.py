from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


_INSECURE_DEV_SECRET = "insecure-dev-secret-change-me-before-deploying"


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Core/runtime
    db_path: str
    run_env: str
    log_level: str

    # Tokens
    jwt_secret: str
    jwt_expiry_days: int

    # Contact quota
    daily_contact_limit: int
    strict_daily_quota: bool

    # Storage
    ledger_timeout_seconds: float

    # Accounts
    password_hash_iterations: int = 100_000
    jwt_algorithm: str = "HS256"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    run_env = os.getenv("RUN_ENV", "local")
    jwt_secret = os.getenv("JWT_SECRET")
    if not jwt_secret:
        if run_env.lower() not in ("local", "test"):
            raise RuntimeError("JWT_SECRET is required when RUN_ENV is not local or test")
        jwt_secret = _INSECURE_DEV_SECRET

    daily_limit = int(os.getenv("DAILY_CONTACT_LIMIT", "10"))
    if daily_limit < 0:
        raise RuntimeError("DAILY_CONTACT_LIMIT must be >= 0")

    return Settings(
        db_path=os.getenv("DB_PATH", "directory.db"),
        run_env=run_env,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        jwt_secret=jwt_secret,
        jwt_expiry_days=int(os.getenv("JWT_EXPIRY_DAYS", "7")),
        daily_contact_limit=daily_limit,
        strict_daily_quota=_as_bool(os.getenv("STRICT_DAILY_QUOTA"), default=True),
        ledger_timeout_seconds=float(os.getenv("LEDGER_TIMEOUT_SECONDS", "5")),
        password_hash_iterations=int(os.getenv("PASSWORD_HASH_ITERATIONS", "100000")),
    )
