from __future__ import annotations

from typing import List, Optional, Protocol

from models.contact_event import ContactEventDetail, RecordOutcome
from models.developer_record import DeveloperDraft, DeveloperRecord
from models.user_record import UserRecord


class ContactLedgerPort(Protocol):
    def try_record_view(
        self,
        viewer_user_id: str,
        developer_id: str,
        day: str,
        limit: Optional[int] = None,
    ) -> RecordOutcome:
        ...

    def has_viewed(self, viewer_user_id: str, developer_id: str, day: str) -> bool:
        ...

    def count_distinct_developers(self, viewer_user_id: str, day: str) -> int:
        ...

    def list_events(self, limit: int = 100) -> List[ContactEventDetail]:
        ...


class DevelopersRepoPort(Protocol):
    def create(self, owner_user_id: str, draft: DeveloperDraft) -> DeveloperRecord:
        ...

    def get(self, developer_id: str) -> Optional[DeveloperRecord]:
        ...

    def list_all(self, work_type: Optional[str] = None, field: Optional[str] = None) -> List[DeveloperRecord]:
        ...


class UsersRepoPort(Protocol):
    def create(self, email: str, password_hash: str, name: str, role: str) -> UserRecord:
        ...

    def get(self, user_id: str) -> Optional[UserRecord]:
        ...

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    def list_all(self) -> List[UserRecord]:
        ...
