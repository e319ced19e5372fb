from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class ContactEvent(BaseModel):
    """Ledger row: a viewer consumed quota for one developer on one UTC day."""

    id: str
    viewer_user_id: str
    developer_id: str
    day: str
    created_at: str

    model_config = ConfigDict(frozen=True)


class ContactEventDetail(BaseModel):
    """Joined audit row from v_contact_events."""

    event_id: str
    viewer_user_id: str
    viewer_name: str | None = None
    viewer_email: str | None = None
    developer_id: str
    developer_first_name: str | None = None
    developer_last_name: str | None = None
    developer_email: str | None = None
    day: str
    created_at: str

    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class RecordOutcome:
    created: bool
