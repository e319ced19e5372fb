"""Role-conditioned redaction shared by every developer read path.

Anonymous callers, callers whose token failed verification, and companies see
profiles without contact fields. Students and admins see full records.
Companies obtain contact fields only through the quota-gated contact action.
"""
from __future__ import annotations

from typing import Iterable, List

from models.developer_record import CONTACT_FIELDS, DeveloperRecord, PublicView
from models.principal import Principal, Viewer


FULL_VIEW_ROLES = frozenset({"student", "admin"})


def can_see_contact_fields(viewer: Viewer) -> bool:
    return isinstance(viewer, Principal) and viewer.role in FULL_VIEW_ROLES


def project(viewer: Viewer, record: DeveloperRecord) -> PublicView:
    if can_see_contact_fields(viewer):
        return PublicView(**record.model_dump())
    # Redacted fields are omitted entirely rather than set to None
    return PublicView(**record.model_dump(exclude=set(CONTACT_FIELDS)))


def project_many(viewer: Viewer, records: Iterable[DeveloperRecord]) -> List[PublicView]:
    return [project(viewer, r) for r in records]
