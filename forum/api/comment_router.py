"""Forum comment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from forum.dependencies import get_comment_service, get_current_user
from forum.models.user import User
from forum.schemas.comment_schema import (
    CommentCreatedResponse,
    CommentListResponse,
    CommentResponse,
    CreateCommentRequest,
)
from forum.schemas.response_schema import success_response
from forum.services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["comments"])

CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


@router.get("", response_model=CommentListResponse)
async def list_comments(
    service: CommentServiceDep,
    limit: str | None = Query(default=None),
    before: str | None = Query(default=None),
) -> dict:
    """List comments, oldest first within the page."""
    rows = await service.list_comments(limit=limit, before=before)
    return success_response(
        comments=[CommentResponse.model_validate(row) for row in rows]
    )


@router.post(
    "",
    response_model=CommentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    body: CreateCommentRequest,
    service: CommentServiceDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    row = await service.post_comment(
        user_id=current_user.id,
        author=current_user.display_name,
        text=body.text,
    )
    return success_response(comment=CommentResponse.model_validate(row))
