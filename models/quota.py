from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from models.developer_record import DeveloperRecord


class QuotaStatus(BaseModel):
    consumed_today: int
    remaining: int
    limit: int
    day: str
    resets_at: str

    model_config = ConfigDict(frozen=True)


class ContactResult(BaseModel):
    """Outcome of a successful contact action.

    ``remaining_quota`` is None for principals exempt from the quota (admins).
    ``created`` is False when the developer had already been viewed today.
    """

    developer: DeveloperRecord
    remaining_quota: int | None = None
    created: bool = False

    model_config = ConfigDict(frozen=True)

    def as_dict(self) -> dict:
        return {
            "developer": self.developer.model_dump(),
            "remainingQuota": self.remaining_quota,
        }
