"""ASGI application entry point.

``asgi_app`` serves Socket.IO under ``/socket.io`` and hands every other
request to the FastAPI app; both resolve sessions from the same Redis store.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import socketio
import structlog
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError

from forum.api.auth_router import router as auth_router
from forum.api.chat_router import router as chat_router
from forum.api.comment_router import router as comment_router
from forum.api.profile_router import router as profile_router
from forum.core.config import settings
from forum.core.database import Base, engine
from forum.core.exceptions import (
    AppException,
    app_exception_handler,
    rate_limit_exceeded_handler,
    store_exception_handler,
    validation_exception_handler,
)
from forum.core.middleware import SessionMiddleware
from forum.core.rate_limit import limiter
from forum.core.redis import close_redis, init_redis
from forum.dependencies import get_optional_session
from forum.models import chat_message, comment, user  # noqa: F401
from forum.realtime.socket import sio
from forum.schemas.auth_schema import HomeResponse, HomeUser
from forum.schemas.response_schema import SuccessResponse, success_response
from forum.schemas.session_schema import SessionData

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        persist_realtime=settings.chat.persist_realtime_messages,
    )
    await init_redis()
    if settings.app.is_development:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield
    await close_redis()
    await engine.dispose()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="Town Square forum: comments, profiles and a live chat room",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.app.debug,
)

app.state.limiter = limiter

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(SQLAlchemyError, store_exception_handler)  # type: ignore[arg-type]

# Middleware (registration order: inner→outer, execution order: outer→inner)
app.add_middleware(SessionMiddleware)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(SuccessResponse):
    status: str


@app.get("/health", response_model=HealthResponse)
async def health_check() -> dict:
    """Health check endpoint."""
    return success_response(status="healthy")


@app.get("/", response_model=HomeResponse)
async def home(session: SessionData | None = Depends(get_optional_session)) -> dict:
    """Home view model: the visitor's session summary, Guest when anonymous."""
    if session is None:
        return success_response(user=HomeUser())
    return success_response(
        user=HomeUser(
            name=session.username,
            is_logged_in=True,
            login_time=session.login_time,
            visit_count=session.visit_count,
        )
    )


# Register routers
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(chat_router)
app.include_router(comment_router)

asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)
