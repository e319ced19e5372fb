from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict


WorkType = Literal["remote", "onsite", "hybrid"]
DeveloperField = Literal["web", "mobile", "ai", "backend", "frontend", "fullstack"]

WORK_TYPES: tuple[str, ...] = get_args(WorkType)
DEVELOPER_FIELDS: tuple[str, ...] = get_args(DeveloperField)

# Fields only disclosed to students, admins, or through the contact action
CONTACT_FIELDS: frozenset[str] = frozenset({"email", "github", "linkedin"})


class DeveloperRecord(BaseModel):
    """App/DB record shape: one published developer profile."""

    id: str
    owner_user_id: str
    first_name: str
    last_name: str
    work_type: WorkType
    field: DeveloperField
    github: str | None = None
    linkedin: str | None = None
    email: str
    created_at: str

    model_config = ConfigDict(frozen=True, extra="ignore")


class PublicView(BaseModel):
    """Role-dependent projection of a DeveloperRecord.

    Contact fields that were not disclosed are left unset, so they are
    dropped by ``as_dict()``. A disclosed-but-empty field is present as None.
    """

    id: str
    owner_user_id: str
    first_name: str
    last_name: str
    work_type: WorkType
    field: DeveloperField
    github: str | None = None
    linkedin: str | None = None
    email: str | None = None
    created_at: str

    model_config = ConfigDict(frozen=True)

    def is_disclosed(self, name: str) -> bool:
        return name in self.model_fields_set

    @property
    def redacted(self) -> bool:
        return not CONTACT_FIELDS <= self.model_fields_set

    def as_dict(self) -> dict:
        return self.model_dump(exclude_unset=True)


class DeveloperDraft(BaseModel):
    """Validated input for creating a profile; owner comes from the principal."""

    first_name: str
    last_name: str
    work_type: WorkType
    field: DeveloperField
    email: str
    github: str | None = None
    linkedin: str | None = None

    model_config = ConfigDict(extra="forbid")
