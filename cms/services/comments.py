"""Comments: list per post, create (bumps the post's counter), owner-only delete."""

import logging

from sqlalchemy import and_, case, or_
from sqlalchemy.orm import Session

from cms.core.errors import NotFound, ValidationFailed
from cms.core.security import TokenClaim
from cms.models import Comment, Post
from cms.models.base import utcnow
from cms.schemas.comments import CommentCreateRequest
from cms.services.ownership import require_owner
from cms.services.pagination import clamp_limit, decode_cursor, encode_cursor
from cms.services.posts import POST_NOT_FOUND, get_post

logger = logging.getLogger(__name__)

CONTENT_REQUIRED = "Content is required"
COMMENT_NOT_FOUND = "Comment not found"
FORBIDDEN_DELETE = "Forbidden: You can only delete your own comments"

DEFAULT_PAGE_SIZE = 50


def list_comments(
    db: Session,
    post_id: str,
    limit: int | None,
    last_key: str | None,
) -> tuple[list[Comment], str | None]:
    """Oldest first. An unknown post simply has no comments."""
    page_size = clamp_limit(limit, DEFAULT_PAGE_SIZE)
    query = db.query(Comment).filter(Comment.post_id == post_id)
    cursor = decode_cursor(last_key)
    if cursor is not None:
        created_at, comment_id = cursor
        query = query.filter(
            or_(
                Comment.created_at > created_at,
                and_(Comment.created_at == created_at, Comment.comment_id > comment_id),
            )
        )
    rows = (
        query.order_by(Comment.created_at.asc(), Comment.comment_id.asc())
        .limit(page_size + 1)
        .all()
    )
    page = rows[:page_size]
    next_key = None
    if len(rows) > page_size:
        next_key = encode_cursor(page[-1].created_at, page[-1].comment_id)
    return page, next_key


def _adjust_comment_count(db: Session, post_id: str, delta: int) -> int:
    """Atomic counter update expressed in SQL; never goes below zero."""
    new_count = Post.comment_count + delta
    return (
        db.query(Post)
        .filter(Post.post_id == post_id)
        .update(
            {
                Post.comment_count: case((new_count < 0, 0), else_=new_count),
                Post.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
    )


def create_comment(
    db: Session,
    claim: TokenClaim,
    post_id: str,
    body: CommentCreateRequest,
) -> Comment:
    if not body.content:
        raise ValidationFailed(CONTENT_REQUIRED)
    get_post(db, post_id)

    comment = Comment(
        post_id=post_id,
        user_id=claim.user_id,
        username=claim.username,
        content=body.content,
        parent_comment_id=body.parent_comment_id,
        comment_avatar_id=body.comment_avatar_id,
        created_at=utcnow(),
    )
    db.add(comment)
    if not _adjust_comment_count(db, post_id, 1):
        # Post vanished between the read and the counter update.
        db.rollback()
        raise NotFound(POST_NOT_FOUND)
    db.commit()
    logger.info(
        "Comment created",
        extra={"comment_id": comment.comment_id, "post_id": post_id, "user_id": claim.user_id},
    )
    return comment


def delete_comment(db: Session, claim: TokenClaim, post_id: str, comment_id: str) -> str:
    """Existence first, then ownership."""
    comment = db.get(Comment, comment_id)
    if comment is None or comment.post_id != post_id:
        raise NotFound(COMMENT_NOT_FOUND)
    require_owner(claim, comment.user_id, FORBIDDEN_DELETE)

    db.delete(comment)
    _adjust_comment_count(db, post_id, -1)
    db.commit()
    logger.info("Comment deleted", extra={"comment_id": comment_id, "post_id": post_id})
    return comment_id
