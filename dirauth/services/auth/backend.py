from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...directory.models import ResolvedIdentity


@dataclass
class AuthResult:
    """Outcome of one authenticate-and-authorize attempt."""
    success: bool
    identity: Optional[ResolvedIdentity] = None
    authorized: bool = False
    error_message: str = ""
