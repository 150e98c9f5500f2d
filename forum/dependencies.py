"""Global dependencies for the application."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from forum.core.database import get_async_session
from forum.core.exceptions import AuthenticationError
from forum.core.redis import get_redis
from forum.models.user import User
from forum.repositories.chat_repo import ChatRepository
from forum.repositories.comment_repo import CommentRepository
from forum.repositories.user_repo import UserRepository
from forum.schemas.session_schema import SessionData
from forum.services.auth_service import AuthService
from forum.services.chat_service import ChatService
from forum.services.comment_service import CommentService
from forum.services.login_attempts import LoginAttemptTracker
from forum.services.profile_service import ProfileService
from forum.services.session_store import SessionStore

# --- Stores ---


def get_session_store() -> SessionStore:
    """Get the SessionStore backed by the active Redis client."""
    return SessionStore(get_redis())


def get_login_attempts() -> LoginAttemptTracker:
    return LoginAttemptTracker(get_redis())


def get_user_repository(
    session: AsyncSession = Depends(get_async_session),
) -> UserRepository:
    """Get UserRepository bound to the current session."""
    return UserRepository(session)


def get_chat_repository(
    session: AsyncSession = Depends(get_async_session),
) -> ChatRepository:
    """Get ChatRepository bound to the current session."""
    return ChatRepository(session)


def get_comment_repository(
    session: AsyncSession = Depends(get_async_session),
) -> CommentRepository:
    return CommentRepository(session)


# --- Session dependencies ---


def get_optional_session(request: Request) -> SessionData | None:
    """Session resolved by the middleware, or None for anonymous visitors."""
    state = getattr(request, "state", None)
    return getattr(state, "session", None) if state else None


def get_current_session(request: Request) -> SessionData:
    """Require a logged-in session."""
    session = get_optional_session(request)
    if session is None or not session.is_logged_in:
        raise AuthenticationError
    return session


def get_session_token(
    request: Request,
    _: SessionData = Depends(get_current_session),
) -> str:
    """Token of the acting session."""
    return str(request.state.session_token)


async def get_current_user(
    session: SessionData = Depends(get_current_session),
    token: str = Depends(get_session_token),
    user_repo: UserRepository = Depends(get_user_repository),
    session_store: SessionStore = Depends(get_session_store),
) -> User:
    """Load the member behind the session.

    A logged-in session must resolve to a user row; one that no longer does is
    destroyed and the request treated as unauthenticated.
    """
    user = await user_repo.find_by_id(session.user_id)
    if user is None:
        await session_store.destroy(token)
        raise AuthenticationError
    return user


# --- Services ---


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    session_store: SessionStore = Depends(get_session_store),
    login_attempts: LoginAttemptTracker = Depends(get_login_attempts),
    session: AsyncSession = Depends(get_async_session),
) -> AuthService:
    """Get AuthService with all dependencies."""
    return AuthService(
        user_repo=user_repo,
        session_store=session_store,
        login_attempts=login_attempts,
        session=session,
    )


def get_chat_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
) -> ChatService:
    return ChatService(chat_repo)


def get_comment_service(
    comment_repo: CommentRepository = Depends(get_comment_repository),
    session: AsyncSession = Depends(get_async_session),
) -> CommentService:
    return CommentService(comment_repo=comment_repo, session=session)


def get_profile_service(
    user_repo: UserRepository = Depends(get_user_repository),
    comment_repo: CommentRepository = Depends(get_comment_repository),
    session: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
) -> ProfileService:
    """Get ProfileService for the authenticated member."""
    return ProfileService(
        user_repo=user_repo,
        comment_repo=comment_repo,
        session=session,
        user_id=current_user.id,
    )
