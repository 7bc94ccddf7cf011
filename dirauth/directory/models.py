from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from ..ad_utils import split_groups, strip_domain


class GroupStrategy(str, Enum):
    # multi-valued membership attribute (memberOf)
    MEMBER_OF = "member_of"
    # OU= segments of the entry's own DN
    DN_OU = "dn_ou"


class BindMode(str, Enum):
    PRINCIPAL = "principal"
    DN_TEMPLATE = "dn_template"


@dataclass(frozen=True)
class DirectoryProfile:
    """How a particular directory addresses users and encodes membership."""

    name: str
    entry_class: str
    key_attribute: str
    name_attribute: str
    email_attribute: str
    group_attribute: str = "memberOf"
    group_strategy: GroupStrategy = GroupStrategy.MEMBER_OF
    bind_mode: BindMode = BindMode.PRINCIPAL
    bind_dn_template: str = "uid={username},{base}"
    anonymous_search: bool = False


ACTIVE_DIRECTORY = DirectoryProfile(
    name="ad",
    entry_class="user",
    key_attribute="sAMAccountName",
    name_attribute="cn",
    email_attribute="userPrincipalName",
)

ACTIVE_DIRECTORY_OU = DirectoryProfile(
    name="ad_ou",
    entry_class="user",
    key_attribute="sAMAccountName",
    name_attribute="cn",
    email_attribute="userPrincipalName",
    group_attribute="distinguishedName",
    group_strategy=GroupStrategy.DN_OU,
)

OPENLDAP = DirectoryProfile(
    name="openldap",
    entry_class="inetOrgPerson",
    key_attribute="uid",
    name_attribute="cn",
    email_attribute="mail",
    bind_mode=BindMode.DN_TEMPLATE,
)

PROFILES = {p.name: p for p in (ACTIVE_DIRECTORY, ACTIVE_DIRECTORY_OU, OPENLDAP)}


def get_profile(name: str) -> DirectoryProfile:
    key = (name or "").strip().lower()
    try:
        return PROFILES[key]
    except KeyError:
        raise ValueError(f"Unknown directory profile: {name!r} (known: {', '.join(sorted(PROFILES))})") from None


@dataclass(frozen=True)
class ClientConfig:
    server_url: str
    search_base: str
    authorized_groups: frozenset[str] = frozenset()
    profile: DirectoryProfile = ACTIVE_DIRECTORY
    starttls: bool = False
    tls_validate: bool = True
    ca_certs_file: str = ""
    connect_timeout: Optional[float] = None
    receive_timeout: Optional[float] = None

    @classmethod
    def create(
        cls,
        server_url: str,
        search_base: str,
        authorized_groups: str | Iterable[str] = "",
        profile: DirectoryProfile | str = ACTIVE_DIRECTORY,
        **kwargs,
    ) -> "ClientConfig":
        """Build a config from a comma-separated group string and a profile name or object."""
        if isinstance(authorized_groups, str):
            groups = split_groups(authorized_groups)
        else:
            groups = frozenset(g.strip() for g in authorized_groups if g and g.strip())
        if isinstance(profile, str):
            profile = get_profile(profile)
        return cls(
            server_url=server_url,
            search_base=search_base,
            authorized_groups=groups,
            profile=profile,
            **kwargs,
        )

    def bind_identity(self, principal: str) -> str:
        if self.profile.bind_mode is BindMode.DN_TEMPLATE:
            return self.profile.bind_dn_template.format(username=strip_domain(principal), base=self.search_base)
        return principal


@dataclass(frozen=True)
class Credential:
    principal: str
    secret: str = field(repr=False)


@dataclass
class DirectoryEntry:
    dn: str
    attributes: dict[str, list[str]] = field(default_factory=dict)

    def values(self, name: str) -> list[str]:
        """Attribute values; attribute names match case-insensitively."""
        if name in self.attributes:
            return self.attributes[name]
        wanted = name.lower()
        for key, vals in self.attributes.items():
            if key.lower() == wanted:
                return vals
        return []

    def first(self, name: str) -> Optional[str]:
        vals = self.values(name)
        return vals[0] if vals else None


@dataclass(frozen=True)
class SearchDone:
    """Terminal item of a search result stream."""

    result: int = 0
    description: str = "success"

    @property
    def ok(self) -> bool:
        return self.result == 0


@dataclass(frozen=True)
class ResolvedIdentity:
    full_name: Optional[str] = None
    email: Optional[str] = None
    groups: frozenset[str] = frozenset()
