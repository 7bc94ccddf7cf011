"""Directory (LDAP) client package.

Public API:
    - ClientConfig, DirectoryProfile and the built-in profiles
    - DirectoryClient
    - DirectoryTransport / Ldap3Transport
"""

from .models import (
    ACTIVE_DIRECTORY,
    ACTIVE_DIRECTORY_OU,
    OPENLDAP,
    BindMode,
    ClientConfig,
    Credential,
    DirectoryEntry,
    DirectoryProfile,
    GroupStrategy,
    ResolvedIdentity,
    SearchDone,
    get_profile,
)
from .client import ClientState, DirectoryClient
from .transport import DirectoryTransport, Ldap3Transport

__all__ = [
    "ACTIVE_DIRECTORY",
    "ACTIVE_DIRECTORY_OU",
    "OPENLDAP",
    "BindMode",
    "ClientConfig",
    "ClientState",
    "Credential",
    "DirectoryClient",
    "DirectoryEntry",
    "DirectoryProfile",
    "DirectoryTransport",
    "GroupStrategy",
    "Ldap3Transport",
    "ResolvedIdentity",
    "SearchDone",
    "get_profile",
]
