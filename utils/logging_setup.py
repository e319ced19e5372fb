from __future__ import annotations

import logging
import sys
from typing import Any, Optional

from config.settings import get_settings


_INITIALIZED: bool = False

# Audit fields appended to every line; services pass them via ``extra``
AUDIT_FIELDS = ("action", "status", "viewer", "developer_id", "remaining", "error")


class SafeExtraFormatter(logging.Formatter):
    """Formatter that fills audit fields a record was logged without."""

    DEFAULTS: dict[str, Any] = {name: "-" for name in AUDIT_FIELDS}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if getattr(record, key, None) is None:
                setattr(record, key, value)
        return super().format(record)


def audit_extra(action: str, status: str, **fields: Any) -> dict[str, Any]:
    """Build an ``extra`` mapping for a contact/auth audit line.

    Unknown keys are dropped so a typo never shadows a LogRecord attribute.
    """
    extra: dict[str, Any] = {"action": action, "status": status}
    for key, value in fields.items():
        if key in AUDIT_FIELDS and value is not None:
            extra[key] = value
    return extra


def _line_format() -> str:
    audit = " ".join(f"{name}=%({name})s" for name in AUDIT_FIELDS)
    return f"%(asctime)s %(levelname)s %(name)s %(message)s {audit}"


def init_logging(level: Optional[str] = None) -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    log_level_str = (level or get_settings().log_level).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not root_logger.handlers:
        # stderr keeps the CLI's JSON output on stdout machine-readable
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(SafeExtraFormatter(fmt=_line_format()))
        root_logger.addHandler(handler)

    _INITIALIZED = True
