"""Comment routes nested under /posts/{post_id}/comments."""

from fastapi import APIRouter, Query, status

from cms.api.auth import CurrentUser
from cms.api.deps import DbSession
from cms.schemas.comments import (
    CommentCreateRequest,
    CommentCreateResponse,
    CommentDeleteResponse,
    CommentOut,
    CommentsListResponse,
)
from cms.services import comments

router = APIRouter()


@router.get("/{post_id}/comments", response_model=CommentsListResponse)
def list_comments(
    post_id: str,
    db: DbSession,
    limit: int | None = Query(default=None, ge=1),
    last_key: str | None = Query(default=None, alias="lastKey"),
) -> CommentsListResponse:
    page, next_key = comments.list_comments(db, post_id, limit, last_key)
    return CommentsListResponse(
        comments=[CommentOut.model_validate(c) for c in page],
        count=len(page),
        next_key=next_key,
    )


@router.post(
    "/{post_id}/comments",
    response_model=CommentCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    post_id: str,
    body: CommentCreateRequest,
    claim: CurrentUser,
    db: DbSession,
) -> CommentCreateResponse:
    comment = comments.create_comment(db, claim, post_id, body)
    return CommentCreateResponse(
        message="Comment created successfully",
        comment=CommentOut.model_validate(comment),
    )


@router.delete("/{post_id}/comments/{comment_id}", response_model=CommentDeleteResponse)
def delete_comment(
    post_id: str,
    comment_id: str,
    claim: CurrentUser,
    db: DbSession,
) -> CommentDeleteResponse:
    deleted_id = comments.delete_comment(db, claim, post_id, comment_id)
    return CommentDeleteResponse(message="Comment deleted successfully", comment_id=deleted_id)
