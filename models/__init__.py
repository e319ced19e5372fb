from .principal import ANONYMOUS, Anonymous, InvalidCredential, Principal, Role, Viewer
from .developer_record import DeveloperDraft, DeveloperRecord, PublicView
from .contact_event import ContactEvent, ContactEventDetail, RecordOutcome
from .quota import ContactResult, QuotaStatus
from .user_record import AuthResult, UserRecord

__all__ = [
    "ANONYMOUS",
    "Anonymous",
    "InvalidCredential",
    "Principal",
    "Role",
    "Viewer",
    "DeveloperDraft",
    "DeveloperRecord",
    "PublicView",
    "ContactEvent",
    "ContactEventDetail",
    "RecordOutcome",
    "ContactResult",
    "QuotaStatus",
    "AuthResult",
    "UserRecord",
]
