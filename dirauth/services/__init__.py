"""Service layer on top of the directory client.

Stable import surface for host applications:
    from dirauth.services import authenticate, authenticate_with_settings
"""

from .auth import AuthResult, authenticate, authenticate_with_settings

__all__ = ["AuthResult", "authenticate", "authenticate_with_settings"]
