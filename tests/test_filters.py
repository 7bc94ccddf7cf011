import pytest

from dirauth.ad_utils import split_groups, strip_domain
from dirauth.directory import (
    ACTIVE_DIRECTORY,
    ACTIVE_DIRECTORY_OU,
    OPENLDAP,
    ClientConfig,
    DirectoryEntry,
    GroupStrategy,
    get_profile,
)
from dirauth.directory.utils import (
    build_user_filter,
    entry_groups,
    escape_ldap_filter_value,
    group_identifier,
    merge_entries,
)


@pytest.mark.parametrize(
    "principal,expected",
    [
        ("CORP\\alice", "alice"),
        ("example\\bob.jones", "bob.jones"),
        ("alice", "alice"),
        ("alice@example.com", "alice@example.com"),
        ("CORP\\", "CORP\\"),
        ("A\\B\\C", "B"),
        ("", ""),
    ],
)
def test_strip_domain(principal, expected):
    assert strip_domain(principal) == expected


@pytest.mark.parametrize("principal", ["CORP\\alice", "EXAMPLE\\alice", "alice"])
def test_filter_uses_username_without_domain(principal):
    flt = build_user_filter(ACTIVE_DIRECTORY, principal)
    assert flt == "(&(objectClass=user)(sAMAccountName=alice))"
    assert "\\" not in flt


def test_filter_follows_profile():
    assert build_user_filter(OPENLDAP, "bob") == "(&(objectClass=inetOrgPerson)(uid=bob))"


def test_filter_escapes_special_characters():
    assert escape_ldap_filter_value("a*b(c)d\\e\x00") == "a\\2ab\\28c\\29d\\5ce\\00"
    assert build_user_filter(ACTIVE_DIRECTORY, "CORP\\*)(uid=*") == (
        "(&(objectClass=user)(sAMAccountName=\\2a\\29\\28uid=\\2a))"
    )


def test_split_groups_ignores_blank_entries():
    assert split_groups("admins, ops,,  ,dev") == frozenset({"admins", "ops", "dev"})
    assert split_groups("") == frozenset()


def test_config_create_parses_groups_once():
    cfg = ClientConfig.create("ldap://h", "dc=example,dc=com", "admins,ops,", profile="openldap")
    assert cfg.authorized_groups == frozenset({"admins", "ops"})
    assert cfg.profile is OPENLDAP


def test_config_create_accepts_iterable_groups():
    cfg = ClientConfig.create("ldap://h", "dc=example,dc=com", ["admins", " ", "ops "])
    assert cfg.authorized_groups == frozenset({"admins", "ops"})


def test_get_profile_unknown():
    with pytest.raises(ValueError):
        get_profile("novell")
    assert get_profile(" AD_OU ") is ACTIVE_DIRECTORY_OU


def test_bind_identity_pass_through_keeps_domain():
    cfg = ClientConfig.create("ldap://h", "dc=example,dc=com", profile="ad")
    assert cfg.bind_identity("CORP\\alice") == "CORP\\alice"


def test_bind_identity_dn_template():
    cfg = ClientConfig.create("ldap://h", "dc=example,dc=com", profile="openldap")
    assert cfg.bind_identity("alice") == "uid=alice,dc=example,dc=com"
    assert cfg.bind_identity("CORP\\alice") == "uid=alice,dc=example,dc=com"


def test_group_identifier():
    assert group_identifier("cn=admins,ou=groups,dc=example,dc=com") == "admins"
    assert group_identifier("admins") == "admins"


def test_entry_groups_member_of():
    entry = DirectoryEntry(
        dn="CN=Alice,OU=Users,DC=example,DC=com",
        attributes={"memberOf": ["CN=admins,OU=Groups,DC=example,DC=com", "CN=dev,OU=Groups,DC=example,DC=com"]},
    )
    assert entry_groups(ACTIVE_DIRECTORY, entry) == {"admins", "dev"}


def test_entry_groups_dn_ou_ignores_member_of():
    assert ACTIVE_DIRECTORY_OU.group_strategy is GroupStrategy.DN_OU
    entry = DirectoryEntry(
        dn="CN=Alice,OU=Engineering,OU=Berlin,DC=example,DC=com",
        attributes={"memberOf": ["CN=admins,OU=Groups,DC=example,DC=com"]},
    )
    assert entry_groups(ACTIVE_DIRECTORY_OU, entry) == {"Engineering", "Berlin"}


def test_merge_entries_last_value_wins_and_groups_union():
    first = DirectoryEntry(
        dn="CN=a",
        attributes={"cn": ["First"], "userPrincipalName": ["first@x"], "memberOf": ["CN=admins,DC=x"]},
    )
    second = DirectoryEntry(dn="CN=b", attributes={"cn": ["Second"], "memberOf": ["CN=ops,DC=x"]})
    identity = merge_entries(ACTIVE_DIRECTORY, [first, second])
    assert identity.full_name == "Second"
    assert identity.email == "first@x"
    assert identity.groups == frozenset({"admins", "ops"})


def test_merge_entries_empty():
    identity = merge_entries(ACTIVE_DIRECTORY, [])
    assert identity.full_name is None
    assert identity.email is None
    assert identity.groups == frozenset()


def test_entry_attribute_lookup_is_case_insensitive():
    entry = DirectoryEntry(dn="CN=a", attributes={"userprincipalname": ["a@x"]})
    assert entry.first("userPrincipalName") == "a@x"
    assert entry.values("mail") == []
