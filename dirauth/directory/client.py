from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Union

from ..errors import (
    AuthenticationError,
    DirectoryConnectionError,
    DisconnectionError,
    PreconditionError,
    SearchError,
    TransportError,
)
from .models import ClientConfig, DirectoryEntry, ResolvedIdentity, SearchDone
from .transport import DirectoryTransport, Ldap3Transport
from .utils import build_user_filter, entry_groups, merge_entries

log = logging.getLogger(__name__)

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class ClientState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    BOUND = "bound"


class DirectoryClient:
    """Authenticate a principal against a directory and resolve its identity.

    One session per client, one operation in flight. Typical use::

        async with DirectoryClient(cfg) as client:
            await client.bind(principal, secret)
            identity = await client.resolve_identity(principal)
            allowed = client.is_authorized(identity.groups)

    Nothing is serialised internally: a search is only meaningful after a
    successful bind on the same session, and callers must not share a client
    between concurrent tasks.
    """

    def __init__(
        self,
        cfg: ClientConfig,
        transport: Optional[DirectoryTransport] = None,
        logger: Optional[LoggerLike] = None,
    ) -> None:
        self.cfg = cfg
        self.transport = transport if transport is not None else Ldap3Transport.from_config(cfg)
        self.log = logger if logger is not None else log
        self.state = ClientState.DISCONNECTED
        self._session: Any = None

    @property
    def session(self) -> Any:
        return self._session

    async def __aenter__(self) -> "DirectoryClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc is None:
            await self.unbind()
            return
        try:
            await self.unbind()
        except DisconnectionError as e:
            # the primary failure is what the caller needs to see
            self.log.warning("Teardown after failed operation also failed: %s", e)

    # -- lifecycle ------------------------------------------------------

    async def connect(self) -> Any:
        if self._session is not None:
            # The old handle is not closed; unbind() first if that matters.
            self.log.warning("connect() on a live session, previous session is abandoned")

        url = self.cfg.server_url
        self.log.debug("Connecting to %s", url)
        try:
            session = await self.transport.open(url)
        except TransportError as e:
            self.log.error("Error connecting to directory server %s: %s", url, e)
            raise DirectoryConnectionError(f"Cannot connect to {url}: {e}", cause=e) from e

        self._session = session
        self.state = ClientState.CONNECTED
        return session

    async def unbind(self) -> bool:
        """Tear the session down. Returns False when there was nothing to tear down."""
        if self._session is None:
            return False

        session = self._session
        self._session = None
        self.state = ClientState.DISCONNECTED
        try:
            await self.transport.close(session)
        except TransportError as e:
            self.log.error("Error during unbind: %s", e)
            raise DisconnectionError(f"Unbind failed: {e}", cause=e) from e
        self.log.debug("Session closed")
        return True

    def _require_session(self, op: str) -> None:
        if self._session is None:
            raise PreconditionError(f"{op}() requires a live session, call connect() first")

    # -- bind -----------------------------------------------------------

    async def bind(self, principal: str, secret: str) -> None:
        self._require_session("bind")
        if self.state is not ClientState.CONNECTED:
            raise PreconditionError("bind() is only valid on a connected, not yet bound session")
        # An empty secret would turn into an unauthenticated bind that servers accept.
        if not principal or not secret:
            raise AuthenticationError("Invalid credentials")

        identity = self.cfg.bind_identity(principal)
        try:
            await self.transport.bind(self._session, identity, secret)
        except TransportError as e:
            self.log.warning("Authentication failed for %s: %s", principal, e)
            raise AuthenticationError("Invalid credentials", cause=e) from e

        self.state = ClientState.BOUND
        self.log.debug("Bound as %s", identity)

    # -- search ---------------------------------------------------------

    async def search(self, search_filter: str, attributes: Sequence[str]) -> list[DirectoryEntry]:
        """Run one subtree search under the search base and buffer every entry.

        Fails with :class:`SearchError` on a non-success final status, even
        when entries were received before it.
        """
        self._require_session("search")
        if self.state is not ClientState.BOUND and not self.cfg.profile.anonymous_search:
            raise PreconditionError("search() requires a bound session")

        entries: list[DirectoryEntry] = []
        done: Optional[SearchDone] = None
        try:
            async for item in self.transport.search(self._session, self.cfg.search_base, search_filter, attributes):
                if isinstance(item, SearchDone):
                    done = item
                elif done is None:
                    entries.append(item)
        except TransportError as e:
            self.log.error("Error searching %s: %s", search_filter, e)
            raise SearchError(f"Search failed: {e}", result=e.result, description=e.description, cause=e) from e

        if done is None:
            raise SearchError("Search result stream ended without a final status")
        if not done.ok:
            self.log.error("Search %s ended with result %s (%s)", search_filter, done.result, done.description)
            raise SearchError(
                f"Search failed with result {done.result} ({done.description})",
                result=done.result,
                description=done.description,
            )

        self.log.debug("Search %s returned %d entries", search_filter, len(entries))
        return entries

    async def _lookup(self, principal: str, attributes: Sequence[str]) -> list[DirectoryEntry]:
        return await self.search(build_user_filter(self.cfg.profile, principal), attributes)

    async def resolve_groups(self, principal: str) -> frozenset[str]:
        profile = self.cfg.profile
        groups: set[str] = set()
        for entry in await self._lookup(principal, [profile.group_attribute]):
            groups |= entry_groups(profile, entry)
        return frozenset(groups)

    async def resolve_full_name(self, principal: str) -> Optional[str]:
        profile = self.cfg.profile
        return merge_entries(profile, await self._lookup(principal, [profile.name_attribute])).full_name

    async def resolve_email(self, principal: str) -> Optional[str]:
        profile = self.cfg.profile
        return merge_entries(profile, await self._lookup(principal, [profile.email_attribute])).email

    async def resolve_identity(self, principal: str) -> ResolvedIdentity:
        profile = self.cfg.profile
        attrs = [profile.name_attribute, profile.email_attribute, profile.group_attribute]
        return merge_entries(profile, await self._lookup(principal, attrs))

    # -- policy ---------------------------------------------------------

    def is_authorized(self, groups: Iterable[str]) -> bool:
        return not self.cfg.authorized_groups.isdisjoint(groups)
