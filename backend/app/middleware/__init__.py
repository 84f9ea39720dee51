"""
Middleware and request-scoped dependencies
"""

from .auth import TrustedHeaderAuthenticator, get_current_user
from .request_context import RequestContextMiddleware

__all__ = [
    "TrustedHeaderAuthenticator",
    "get_current_user",
    "RequestContextMiddleware"
]
