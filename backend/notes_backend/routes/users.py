"""Notes Backend: profile of the authenticated user."""

from fastapi import APIRouter, Depends

from notes_backend.dependencies import get_current_user, get_store
from notes_backend.schemas.auth import CurrentUser, UserPublic
from notes_backend.schemas.common import ErrorResponse, SuccessResponse
from notes_backend.services.identity_service import identity_service
from notes_backend.store import JsonStore

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/me",
    response_model=SuccessResponse[UserPublic],
    summary="Current user's profile",
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    store: JsonStore = Depends(get_store),
) -> SuccessResponse[UserPublic]:
    profile = identity_service.get_profile(store, current_user.id)
    return SuccessResponse[UserPublic](data=profile)
