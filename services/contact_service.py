from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, time, timedelta, timezone
from typing import Callable, Optional

from config.settings import Settings, get_settings
from db.repos.contacts_repo import ContactLedger
from db.repos.developers_repo import DevelopersRepo
from models.developer_record import DeveloperRecord
from models.principal import Principal, Viewer
from models.quota import ContactResult, QuotaStatus
from ports.repos import ContactLedgerPort, DevelopersRepoPort
from services.errors import NotFound, QuotaExceeded, RoleNotPermitted, SelfViewNotAllowed
from services.identity import require_principal
from utils.logging_setup import audit_extra


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_day(now: datetime) -> str:
    return now.astimezone(timezone.utc).date().isoformat()


def next_reset(now: datetime) -> str:
    """ISO timestamp of the next UTC midnight, when daily quotas start over."""
    tomorrow = now.astimezone(timezone.utc).date() + timedelta(days=1)
    return datetime.combine(tomorrow, time.min, tzinfo=timezone.utc).isoformat()


class ContactService:
    """Quota-gated disclosure of a developer's full profile.

    Companies spend one unit of their daily quota per distinct developer per
    UTC day; re-viewing a developer already seen today is free. Admins bypass
    the ledger. Students and profile owners are rejected.
    """

    def __init__(
        self,
        developers: DevelopersRepoPort,
        ledger: ContactLedgerPort,
        daily_limit: int = 10,
        strict_quota: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.developers = developers
        self.ledger = ledger
        self.daily_limit = daily_limit
        self.strict_quota = strict_quota
        self.clock = clock or utc_now

    @classmethod
    def from_connection(
        cls,
        conn: sqlite3.Connection,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "ContactService":
        settings = settings or get_settings()
        return cls(
            DevelopersRepo(conn),
            ContactLedger(conn),
            daily_limit=settings.daily_contact_limit,
            strict_quota=settings.strict_daily_quota,
            clock=clock,
        )

    def view_contact(self, viewer: Viewer, developer_id: str) -> ContactResult:
        principal = require_principal(viewer)

        developer = self.developers.get(developer_id)
        if developer is None:
            raise NotFound("Developer not found")
        if developer.owner_user_id == principal.user_id:
            raise SelfViewNotAllowed("You cannot view your own profile through the contact action")
        if principal.role == "student":
            self._log_denied(principal, developer_id, "role_not_permitted")
            raise RoleNotPermitted("Students cannot view other students' contact details")

        now = self.clock()
        today = utc_day(now)

        if principal.role == "admin":
            logging.info(
                "Contact granted (quota exempt)",
                extra=audit_extra("contact.granted", "exempt", viewer=principal.user_id, developer_id=developer_id),
            )
            return ContactResult(developer=developer, remaining_quota=None, created=False)

        return self._company_view(principal, developer_id, developer, today, now)

    def _company_view(
        self, principal: Principal, developer_id: str, developer: DeveloperRecord, today: str, now: datetime
    ) -> ContactResult:
        consumed = self.ledger.count_distinct_developers(principal.user_id, today)
        already_viewed = self.ledger.has_viewed(principal.user_id, developer_id, today)
        if not already_viewed and consumed >= self.daily_limit:
            self._log_denied(principal, developer_id, "quota_exceeded", remaining=0)
            raise QuotaExceeded(limit=self.daily_limit, day=today, resets_at=next_reset(now))

        cap = self.daily_limit if self.strict_quota else None
        outcome = self.ledger.try_record_view(principal.user_id, developer_id, today, limit=cap)
        if cap is not None and not outcome.created and not already_viewed:
            # Either a concurrent duplicate already recorded this developer, or
            # concurrent requests for other developers used up the last slot.
            if not self.ledger.has_viewed(principal.user_id, developer_id, today):
                self._log_denied(principal, developer_id, "quota_exceeded", remaining=0)
                raise QuotaExceeded(limit=self.daily_limit, day=today, resets_at=next_reset(now))

        remaining = max(0, self.daily_limit - self.ledger.count_distinct_developers(principal.user_id, today))
        logging.info(
            "Contact granted",
            extra=audit_extra(
                "contact.granted",
                "new" if outcome.created else "repeat",
                viewer=principal.user_id,
                developer_id=developer_id,
                remaining=remaining,
            ),
        )
        return ContactResult(developer=developer, remaining_quota=remaining, created=outcome.created)

    def quota_status(self, viewer: Viewer) -> QuotaStatus:
        principal = require_principal(viewer)
        if principal.role != "company":
            raise RoleNotPermitted("Quota status is only available to companies")
        now = self.clock()
        today = utc_day(now)
        consumed = self.ledger.count_distinct_developers(principal.user_id, today)
        return QuotaStatus(
            consumed_today=consumed,
            remaining=max(0, self.daily_limit - consumed),
            limit=self.daily_limit,
            day=today,
            resets_at=next_reset(now),
        )

    @staticmethod
    def _log_denied(principal: Principal, developer_id: str, reason: str, remaining: Optional[int] = None) -> None:
        logging.info(
            f"Contact denied: {reason}",
            extra=audit_extra(
                "contact.denied", reason, viewer=principal.user_id, developer_id=developer_id, remaining=remaining
            ),
        )
