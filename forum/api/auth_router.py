"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from forum.core.config import settings
from forum.core.rate_limit import limiter
from forum.dependencies import (
    get_auth_service,
    get_current_session,
    get_session_token,
)
from forum.schemas.auth_schema import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    UserResponse,
)
from forum.schemas.response_schema import MessageResponse, success_response
from forum.schemas.session_schema import SessionData
from forum.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token cookie read by both HTTP and Socket.IO."""
    response.set_cookie(
        key=settings.session.cookie_name,
        value=token,
        max_age=settings.session.ttl_seconds,
        httponly=True,
        secure=settings.session.cookie_secure,
        samesite=settings.session.cookie_samesite,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session.cookie_name,
        httponly=True,
        secure=settings.session.cookie_secure,
        samesite=settings.session.cookie_samesite,
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.auth.register_rate_limit)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Register a new member."""
    user = await auth_service.register(body)
    return success_response(user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.auth.login_rate_limit)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Authenticate and receive the session cookie."""
    token, session, user = await auth_service.login(body)
    set_session_cookie(response, token)
    return success_response(
        user=UserResponse.model_validate(user),
        session=SessionResponse.model_validate(session),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    auth_service: AuthServiceDep,
    session: SessionData = Depends(get_current_session),
    token: str = Depends(get_session_token),
) -> dict:
    """Destroy the current session."""
    await auth_service.logout(token, session)
    clear_session_cookie(response)
    return success_response(message="Successfully logged out")
