"""
Authentication dependency for endpoints that need a user identity
"""
from typing import Any, Dict

from fastapi import Request

from app.core.exceptions import AuthenticationError
from app.utils.logger import get_logger, user_id_var

logger = get_logger(__name__)


class TrustedHeaderAuthenticator:
    """
    Reads the user id from a header set by an upstream auth gateway.

    Token verification happens before requests reach this service; swap in
    another authenticator on ``app.state.authenticator`` to change that.
    """

    def __init__(self, header_name: str = "X-User-Id"):
        self.header_name = header_name

    async def __call__(self, request: Request) -> Dict[str, Any]:
        user_id = request.headers.get(self.header_name, "").strip()
        if not user_id:
            raise AuthenticationError(
                "Authentication required",
                details={"header": self.header_name}
            )
        return {"user_id": user_id}


async def get_current_user(request: Request) -> Dict[str, Any]:
    """Resolve the calling user via the app's configured authenticator"""
    authenticator = request.app.state.authenticator
    current_user = await authenticator(request)

    request.state.user_id = current_user["user_id"]
    user_id_var.set(current_user["user_id"])
    return current_user
