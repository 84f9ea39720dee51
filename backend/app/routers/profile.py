"""
User profile endpoint
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_user_store
from app.middleware.auth import get_current_user
from app.models.responses import MessageResponse, ProfileResponse
from app.services.user_store import UserStore
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={401: {"model": MessageResponse}, 404: {"model": MessageResponse}, 500: {"model": MessageResponse}}
)
async def get_profile(
    current_user: Dict[str, Any] = Depends(get_current_user),
    user_store: UserStore = Depends(get_user_store)
):
    """Return the authenticated user's public profile fields"""
    user_id = current_user["user_id"]

    try:
        user = await user_store.get_user(user_id)
    except Exception as e:
        logger.exception(
            "profile_lookup_failed",
            user_id=user_id,
            error=str(e),
            error_type=type(e).__name__
        )
        return JSONResponse(status_code=500, content={"message": "Internal Server Error"})

    if user is None:
        logger.info("profile_not_found", user_id=user_id)
        return JSONResponse(status_code=404, content={"message": "User not found"})

    return ProfileResponse(
        email=user.email,
        username=user.username,
        gender=user.gender,
        avatar_id=user.avatar_id
    )
