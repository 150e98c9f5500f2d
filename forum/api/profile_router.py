"""Profile and account management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from forum.api.auth_router import clear_session_cookie
from forum.dependencies import (
    get_auth_service,
    get_current_session,
    get_profile_service,
    get_session_token,
)
from forum.schemas.auth_schema import ChangePasswordRequest, UserResponse
from forum.schemas.comment_schema import CommentResponse
from forum.schemas.profile_schema import (
    ChangeDisplayNameRequest,
    ChangeEmailRequest,
    CustomizationRequest,
    ProfileResponse,
)
from forum.schemas.response_schema import MessageResponse, success_response
from forum.schemas.session_schema import SessionData
from forum.services.auth_service import AuthService
from forum.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])

ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.get("", response_model=ProfileResponse)
async def get_profile(service: ProfileServiceDep) -> dict:
    """The member's profile and their ten latest comments."""
    user, comments = await service.get_profile()
    return success_response(
        user=UserResponse.model_validate(user),
        comments=[CommentResponse.model_validate(row) for row in comments],
    )


@router.post("/password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    response: Response,
    auth_service: AuthServiceDep,
    session: SessionData = Depends(get_current_session),
    token: str = Depends(get_session_token),
) -> dict:
    """Change the password; the current session ends."""
    await auth_service.change_password(session.user_id, token, body)
    clear_session_cookie(response)
    return success_response(message="Password changed. Please log in again.")


@router.post("/email", response_model=MessageResponse)
async def change_email(body: ChangeEmailRequest, service: ProfileServiceDep) -> dict:
    await service.change_email(body)
    return success_response(message="Email updated successfully")


@router.post("/display-name", response_model=MessageResponse)
async def change_display_name(
    body: ChangeDisplayNameRequest, service: ProfileServiceDep
) -> dict:
    await service.change_display_name(body)
    return success_response(message="Display name updated successfully")


@router.post("/customization", response_model=MessageResponse)
async def update_customization(
    body: CustomizationRequest, service: ProfileServiceDep
) -> dict:
    await service.update_customization(body)
    return success_response(message="Profile updated successfully")
