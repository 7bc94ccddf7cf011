from __future__ import annotations

from typing import Iterable, Optional

from ..ad_utils import strip_domain
from ..utils.dn import dn_first_component_value, dn_values_of
from .models import DirectoryEntry, DirectoryProfile, GroupStrategy, ResolvedIdentity


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def build_user_filter(profile: DirectoryProfile, principal: str) -> str:
    key = escape_ldap_filter_value(strip_domain(principal))
    return f"(&(objectClass={profile.entry_class})({profile.key_attribute}={key}))"


def group_identifier(value: str) -> str:
    """``cn=admins,ou=groups,dc=example,dc=com`` -> ``admins``; plain names pass through."""
    if "=" not in value:
        return value
    return dn_first_component_value(value)


def entry_groups(profile: DirectoryProfile, entry: DirectoryEntry) -> set[str]:
    if profile.group_strategy is GroupStrategy.DN_OU:
        return set(dn_values_of(entry.dn, "OU"))
    groups = set()
    for value in entry.values(profile.group_attribute):
        gid = group_identifier(value)
        if gid:
            groups.add(gid)
    return groups


def merge_entries(profile: DirectoryProfile, entries: Iterable[DirectoryEntry]) -> ResolvedIdentity:
    """Reduce matching entries to one identity.

    Several entries for one principal should not happen; if they do, the last
    entry carrying a value wins for name and email and groups are unioned.
    """
    full_name: Optional[str] = None
    email: Optional[str] = None
    groups: set[str] = set()
    for entry in entries:
        name = entry.first(profile.name_attribute)
        if name is not None:
            full_name = name
        mail = entry.first(profile.email_attribute)
        if mail is not None:
            email = mail
        groups |= entry_groups(profile, entry)
    return ResolvedIdentity(full_name=full_name, email=email, groups=frozenset(groups))
