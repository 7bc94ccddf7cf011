"""Authenticate users against an LDAP / Active Directory server and
authorize them by group membership."""

from .directory import (
    ClientConfig,
    Credential,
    DirectoryClient,
    DirectoryProfile,
    Ldap3Transport,
    ResolvedIdentity,
    get_profile,
)
from .errors import (
    AuthenticationError,
    DirectoryConnectionError,
    DirectoryError,
    DisconnectionError,
    PreconditionError,
    SearchError,
)
from .services.auth import AuthResult, authenticate, authenticate_with_settings

__all__ = [
    "AuthResult",
    "AuthenticationError",
    "ClientConfig",
    "Credential",
    "DirectoryClient",
    "DirectoryConnectionError",
    "DirectoryError",
    "DirectoryProfile",
    "DisconnectionError",
    "Ldap3Transport",
    "PreconditionError",
    "ResolvedIdentity",
    "SearchError",
    "authenticate",
    "authenticate_with_settings",
    "get_profile",
]
