"""
User record store used by the profile endpoint
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from app.models.entities import UserProfile
from app.utils.logger import get_logger

logger = get_logger(__name__)


class UserStore(ABC):
    """Key-value access to user records by id"""

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[UserProfile]:
        """
        Look up a user record

        Returns:
            The record, or None if no user has this id

        Raises:
            StorageError: If the backing store cannot be read
        """


class InMemoryUserStore(UserStore):
    """Dictionary-backed store, for single-process deployments and tests"""

    def __init__(self, users: Optional[Iterable[UserProfile]] = None):
        self._users: Dict[str, UserProfile] = {user.id: user for user in users or ()}

    async def get_user(self, user_id: str) -> Optional[UserProfile]:
        user = self._users.get(user_id)
        logger.debug("user_lookup", user_id=user_id, found=user is not None)
        return user
