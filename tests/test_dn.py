from dirauth.utils.dn import dn_components, dn_first_component_value, dn_values_of


def test_components_plain():
    assert dn_components("CN=admins,OU=Groups,DC=example,DC=com") == [
        ("CN", "admins"),
        ("OU", "Groups"),
        ("DC", "example"),
        ("DC", "com"),
    ]


def test_components_escaped_comma_and_spaces():
    assert dn_components("CN=Smith\\, John , OU=Sales,DC=corp") == [
        ("CN", "Smith, John"),
        ("OU", "Sales"),
        ("DC", "corp"),
    ]


def test_components_empty():
    assert dn_components("") == []
    assert dn_components(None) == []


def test_first_component_value():
    assert dn_first_component_value("cn=admins,ou=groups,dc=example,dc=com") == "admins"
    assert dn_first_component_value("CN=USB\\=Deny,OU=x") == "USB=Deny"
    assert dn_first_component_value("") == ""


def test_values_of_matches_type_case_insensitively():
    dn = "CN=Alice,OU=Engineering,ou=Berlin,DC=example,DC=com"
    assert dn_values_of(dn, "OU") == ["Engineering", "Berlin"]
    assert dn_values_of(dn, "ou") == ["Engineering", "Berlin"]
    assert dn_values_of(dn, "O") == []


def test_hex_escapes_are_decoded_as_utf8():
    assert dn_values_of("CN=a,OU=J\\C3\\B6rg,DC=x", "OU") == ["Jörg"]
    assert dn_first_component_value("CN=Smith\\2C John,OU=x") == "Smith, John"
