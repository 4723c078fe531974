"""
Services layer for RusTour.

Provides the session logic as reusable services that can be consumed by
the CLI or any other caller.
"""

from .base import BaseService, ServiceContext, validate_base_url
from .session_manager import SessionManager, SessionState, AuthResult

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    "validate_base_url",
    # Services
    "SessionManager",
    # Data classes
    "SessionState",
    "AuthResult",
]


def create_services(context: ServiceContext = None):
    """
    Factory function to create all services with proper dependencies.

    Args:
        context: Optional ServiceContext (creates one if not provided)

    Returns:
        Tuple of (context, session)
    """
    if context is None:
        context = ServiceContext.create()

    session = SessionManager(context)

    return context, session
