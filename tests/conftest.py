import pytest

from dirauth.directory import ClientConfig, DirectoryClient

from tests.mocks.directory_mocks import FakeTransport


@pytest.fixture
def ad_config():
    return ClientConfig.create(
        server_url="ldap://dc1.example.com",
        search_base="dc=example,dc=com",
        authorized_groups="admins,ops",
        profile="ad",
    )


@pytest.fixture
def ou_config():
    return ClientConfig.create(
        server_url="ldap://dc1.example.com",
        search_base="dc=example,dc=com",
        authorized_groups="Engineering,Ops",
        profile="ad_ou",
    )


@pytest.fixture
def make_client(ad_config):
    def _make(transport=None, cfg=None, **kwargs):
        return DirectoryClient(cfg or ad_config, transport=transport or FakeTransport(), **kwargs)

    return _make
