from __future__ import annotations

import logging
from typing import Optional, Union

from ...directory import ClientConfig, Credential, DirectoryClient, DirectoryTransport
from ...env_settings import DirectorySettings, config_from_settings, get_settings
from ...errors import AuthenticationError
from .backend import AuthResult

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password."
ACCESS_DENIED = "Access denied: user is not a member of an authorized group."
NOT_CONFIGURED = "Directory is not configured (check DIRAUTH_SERVER_URL and DIRAUTH_SEARCH_BASE)."


async def authenticate(
    credential: Credential,
    cfg: ClientConfig,
    transport: Optional[DirectoryTransport] = None,
    logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
) -> AuthResult:
    """Authenticate a user against the directory and apply the group policy.

    connect -> bind -> resolve identity -> authorize -> unbind.

    Args:
        credential: Principal (``user`` or ``DOMAIN\\user``) and password.
        cfg: Directory client configuration.
        transport: Directory transport; ldap3 when omitted.
        logger: Logger to report through; module logger when omitted.

    Returns:
        AuthResult: success only for a valid, authorized user. A rejected
        bind never tells an unknown user apart from a wrong password.

    Raises:
        DirectoryConnectionError, SearchError, DisconnectionError: the
        directory could not answer; nothing is retried.
    """
    logger = logger if logger is not None else log

    async with DirectoryClient(cfg, transport=transport, logger=logger) as client:
        try:
            await client.bind(credential.principal, credential.secret)
        except AuthenticationError:
            return AuthResult(success=False, error_message=INVALID_CREDENTIALS)

        identity = await client.resolve_identity(credential.principal)

    if not client.is_authorized(identity.groups):
        logger.info("Access denied for %s: no authorized group", credential.principal)
        return AuthResult(success=False, identity=identity, authorized=False, error_message=ACCESS_DENIED)

    logger.info("Authenticated %s", credential.principal)
    return AuthResult(success=True, identity=identity, authorized=True)


async def authenticate_with_settings(
    credential: Credential,
    settings: Optional[DirectorySettings] = None,
    transport: Optional[DirectoryTransport] = None,
    logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
) -> AuthResult:
    """Same as :func:`authenticate`, configured from ``DIRAUTH_*`` settings."""
    cfg = config_from_settings(settings if settings is not None else get_settings())
    if not cfg:
        return AuthResult(success=False, error_message=NOT_CONFIGURED)
    return await authenticate(credential, cfg, transport=transport, logger=logger)
