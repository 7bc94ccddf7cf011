"""Error taxonomy of the directory client.

None of these are retried inside the package. Every error carries the
originating transport failure in ``cause`` and is chained with ``raise ... from``.
"""
from __future__ import annotations


class DirectoryError(Exception):
    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class DirectoryConnectionError(DirectoryError, ConnectionError):
    """Directory unreachable or session not established."""


class PreconditionError(DirectoryConnectionError):
    """Operation invoked without a live session (caller contract violation)."""


class AuthenticationError(DirectoryError):
    """Bind rejected. Wrong password and unknown user look the same."""


class SearchError(DirectoryError):
    def __init__(
        self,
        message: str,
        result: int | None = None,
        description: str = "",
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause)
        self.result = result
        self.description = description


class DisconnectionError(DirectoryError):
    """Teardown of the session failed."""


class TransportError(Exception):
    """Raised by transports; translated into the taxonomy above by the client."""

    def __init__(self, description: str, result: int | None = None) -> None:
        super().__init__(description)
        self.description = description
        self.result = result
