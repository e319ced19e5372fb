from .identity import AuthenticatorPort
from .repos import ContactLedgerPort, DevelopersRepoPort, UsersRepoPort

__all__ = [
    "AuthenticatorPort",
    "ContactLedgerPort",
    "DevelopersRepoPort",
    "UsersRepoPort",
]
