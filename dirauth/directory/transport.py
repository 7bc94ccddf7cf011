from __future__ import annotations

import asyncio
import ssl
from typing import Any, AsyncIterator, Optional, Protocol, Sequence, Union

from ldap3 import NONE, SIMPLE, SUBTREE, SYNC, Connection, Server, Tls
from ldap3.core.exceptions import LDAPException

from ..errors import TransportError
from .models import ClientConfig, DirectoryEntry, SearchDone

SearchItem = Union[DirectoryEntry, SearchDone]


class DirectoryTransport(Protocol):
    """Wire-level collaborator: one session per connection, one call in flight."""

    async def open(self, url: str) -> Any:
        ...

    async def bind(self, session: Any, identity: str, secret: str) -> None:
        ...

    def search(
        self, session: Any, base: str, search_filter: str, attributes: Sequence[str]
    ) -> AsyncIterator[SearchItem]:
        ...

    async def close(self, session: Any) -> None:
        ...


def _as_strings(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    out: list[str] = []
    for v in value:
        if isinstance(v, (bytes, bytearray)):
            out.append(bytes(v).decode("utf-8", errors="replace"))
        else:
            out.append(str(v))
    return out


def _entry_from_response(item: dict) -> DirectoryEntry:
    attrs = item.get("attributes")
    if attrs is None:
        attrs = item.get("raw_attributes") or {}
    return DirectoryEntry(
        dn=str(item.get("dn") or ""),
        attributes={str(k): _as_strings(v) for k, v in dict(attrs).items()},
    )


class Ldap3Transport:
    """:class:`DirectoryTransport` on top of ldap3.

    ldap3's synchronous strategy blocks, so every call is pushed to a worker
    thread with :func:`asyncio.to_thread`; the event loop never waits on a socket.
    """

    def __init__(
        self,
        starttls: bool = False,
        tls_validate: bool = True,
        ca_certs_file: str = "",
        connect_timeout: Optional[float] = None,
        receive_timeout: Optional[float] = None,
        client_strategy: str = SYNC,
        server: Optional[Server] = None,
    ) -> None:
        self.starttls = starttls
        self.connect_timeout = connect_timeout
        self.receive_timeout = receive_timeout
        self.client_strategy = client_strategy
        self._server = server

        tls_kwargs: dict[str, Any] = {
            "validate": ssl.CERT_REQUIRED if tls_validate else ssl.CERT_NONE,
        }
        # Apply custom CA only when verification is enabled.
        if tls_validate and ca_certs_file:
            tls_kwargs["ca_certs_file"] = ca_certs_file
        self.tls = Tls(**tls_kwargs)

    @classmethod
    def from_config(cls, cfg: ClientConfig, **kwargs) -> "Ldap3Transport":
        return cls(
            starttls=cfg.starttls,
            tls_validate=cfg.tls_validate,
            ca_certs_file=cfg.ca_certs_file,
            connect_timeout=cfg.connect_timeout,
            receive_timeout=cfg.receive_timeout,
            **kwargs,
        )

    def _make_server(self, url: str) -> Server:
        if self._server is not None:
            return self._server
        # ldap3 picks scheme (ldap/ldaps) and port out of the URL itself.
        return Server(url, get_info=NONE, tls=self.tls, connect_timeout=self.connect_timeout)

    def _open(self, url: str) -> Connection:
        conn = Connection(
            self._make_server(url),
            auto_bind=False,
            authentication=SIMPLE,
            client_strategy=self.client_strategy,
            receive_timeout=self.receive_timeout,
            raise_exceptions=False,
        )
        conn.open()
        if not self.starttls:
            return conn
        try:
            if not conn.start_tls():
                res = dict(conn.result or {})
                raise TransportError(str(res.get("description") or "StartTLS failed"), res.get("result"))
        except (TransportError, LDAPException):
            # no session is handed out on this path, so close the socket here
            conn.unbind()
            raise
        return conn

    async def open(self, url: str) -> Connection:
        try:
            return await asyncio.to_thread(self._open, url)
        except LDAPException as e:
            raise TransportError(str(e)) from e

    def _bind(self, conn: Connection, identity: str, secret: str) -> None:
        conn.user = identity
        conn.password = secret
        if not conn.bind():
            res = dict(conn.result or {})
            raise TransportError(
                str(res.get("description") or res.get("message") or "bind failed"),
                res.get("result"),
            )

    async def bind(self, session: Connection, identity: str, secret: str) -> None:
        try:
            await asyncio.to_thread(self._bind, session, identity, secret)
        except LDAPException as e:
            raise TransportError(str(e)) from e

    def _search(
        self, conn: Connection, base: str, search_filter: str, attributes: Sequence[str]
    ) -> tuple[list[DirectoryEntry], SearchDone]:
        conn.search(
            search_base=base,
            search_filter=search_filter,
            search_scope=SUBTREE,
            attributes=list(attributes),
        )
        entries = [
            _entry_from_response(item)
            for item in (conn.response or [])
            if item.get("type") == "searchResEntry"
        ]
        res = dict(conn.result or {})
        done = SearchDone(
            result=int(res.get("result", -1)),
            description=str(res.get("description") or ""),
        )
        return entries, done

    async def search(
        self, session: Connection, base: str, search_filter: str, attributes: Sequence[str]
    ) -> AsyncIterator[SearchItem]:
        try:
            entries, done = await asyncio.to_thread(self._search, session, base, search_filter, attributes)
        except LDAPException as e:
            raise TransportError(str(e)) from e
        for entry in entries:
            yield entry
        yield done

    async def close(self, session: Connection) -> None:
        try:
            await asyncio.to_thread(session.unbind)
        except LDAPException as e:
            raise TransportError(str(e)) from e
