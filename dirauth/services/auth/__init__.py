from .backend import AuthResult
from .directory import authenticate, authenticate_with_settings

__all__ = ["AuthResult", "authenticate", "authenticate_with_settings"]
