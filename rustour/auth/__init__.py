"""
Authentication module for RusTour.

Provides the wire models, error taxonomy and durable token storage used
by the session manager.
"""

from .errors import AuthError, AuthErrorKind
from .models import Credentials, RegistrationRequest, LoginResponse, UserPayload, User
from .token_store import TokenStore

__all__ = [
    "AuthError",
    "AuthErrorKind",
    "Credentials",
    "RegistrationRequest",
    "LoginResponse",
    "UserPayload",
    "User",
    "TokenStore",
]
