from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .directory.models import ClientConfig


class DirectorySettings(BaseSettings):
    server_url: str = Field("", alias="DIRAUTH_SERVER_URL")
    search_base: str = Field("", alias="DIRAUTH_SEARCH_BASE")
    authorized_groups: str = Field("", alias="DIRAUTH_AUTHORIZED_GROUPS")
    profile: str = Field("ad", alias="DIRAUTH_PROFILE")

    starttls: bool = Field(False, alias="DIRAUTH_STARTTLS")
    tls_validate: bool = Field(True, alias="DIRAUTH_TLS_VALIDATE")
    ca_certs_file: str = Field("", alias="DIRAUTH_CA_CERTS_FILE")
    connect_timeout: Optional[float] = Field(None, alias="DIRAUTH_CONNECT_TIMEOUT")
    receive_timeout: Optional[float] = Field(None, alias="DIRAUTH_RECEIVE_TIMEOUT")

    log_level: str = Field("INFO", alias="DIRAUTH_LOG_LEVEL")
    log_dir: str = Field("", alias="DIRAUTH_LOG_DIR")

    model_config = SettingsConfigDict(populate_by_name=True)


@lru_cache(maxsize=1)
def get_settings() -> DirectorySettings:
    return DirectorySettings()


def config_from_settings(st: DirectorySettings) -> ClientConfig | None:
    """Build ClientConfig from settings; None while the directory is not configured."""
    if not st.server_url.strip() or not st.search_base.strip():
        return None
    return ClientConfig.create(
        server_url=st.server_url.strip(),
        search_base=st.search_base.strip(),
        authorized_groups=st.authorized_groups,
        profile=st.profile,
        starttls=st.starttls,
        tls_validate=st.tls_validate,
        ca_certs_file=st.ca_certs_file,
        connect_timeout=st.connect_timeout,
        receive_timeout=st.receive_timeout,
    )
