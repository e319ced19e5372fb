from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from data_validator import DataValidator
from db.repos.contacts_repo import ContactLedger
from db.repos.developers_repo import DevelopersRepo
from db.repos.users_repo import UsersRepo
from models.contact_event import ContactEventDetail
from models.developer_record import DEVELOPER_FIELDS, WORK_TYPES, DeveloperRecord, PublicView
from models.principal import Principal, Viewer
from models.user_record import UserRecord
from ports.repos import ContactLedgerPort, DevelopersRepoPort, UsersRepoPort
from services.errors import NotFound, RoleNotPermitted, ValidationFailed
from services.identity import require_principal
from services.visibility import project, project_many
from utils.logging_setup import audit_extra


class DirectoryService:
    """Profile reads and creation. Every read goes through the visibility policy."""

    def __init__(
        self,
        developers: DevelopersRepoPort,
        users: UsersRepoPort,
        ledger: ContactLedgerPort,
        validator: Optional[DataValidator] = None,
    ) -> None:
        self.developers = developers
        self.users = users
        self.ledger = ledger
        self.validator = validator or DataValidator()

    @classmethod
    def from_connection(cls, conn: sqlite3.Connection) -> "DirectoryService":
        return cls(DevelopersRepo(conn), UsersRepo(conn), ContactLedger(conn))

    # --- public reads ---
    def list_developers(
        self,
        viewer: Viewer,
        work_type: Optional[str] = None,
        field: Optional[str] = None,
    ) -> List[PublicView]:
        errors = []
        if work_type and work_type not in WORK_TYPES:
            errors.append(f"work_type must be one of {', '.join(WORK_TYPES)}")
        if field and field not in DEVELOPER_FIELDS:
            errors.append(f"field must be one of {', '.join(DEVELOPER_FIELDS)}")
        if errors:
            raise ValidationFailed(errors)
        return project_many(viewer, self.developers.list_all(work_type=work_type, field=field))

    def get_developer(self, viewer: Viewer, developer_id: str) -> PublicView:
        record = self.developers.get(developer_id)
        if record is None:
            raise NotFound("Developer not found")
        return project(viewer, record)

    # --- students ---
    def create_profile(self, viewer: Viewer, data: Dict[str, Any]) -> DeveloperRecord:
        principal = require_principal(viewer)
        if principal.role != "student":
            raise RoleNotPermitted("Only students can create a developer profile")
        draft, errors = self.validator.build_profile_draft(data)
        if draft is None:
            raise ValidationFailed(errors)
        record = self.developers.create(principal.user_id, draft)
        logging.info(
            f"Created developer profile {record.id}",
            extra=audit_extra("profile.create", "ok", viewer=principal.user_id, developer_id=record.id),
        )
        return record

    # --- admins ---
    def list_users(self, viewer: Viewer) -> List[UserRecord]:
        self._require_admin(viewer)
        return self.users.list_all()

    def list_contact_events(self, viewer: Viewer, limit: int = 100) -> List[ContactEventDetail]:
        self._require_admin(viewer)
        return self.ledger.list_events(limit=limit)

    @staticmethod
    def _require_admin(viewer: Viewer) -> Principal:
        principal = require_principal(viewer)
        if principal.role != "admin":
            raise RoleNotPermitted("Admin role required")
        return principal
