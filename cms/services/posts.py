"""Posts: create, read, list, update and owner-only delete."""

import logging

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from cms.core.errors import NotFound, ValidationFailed
from cms.core.security import TokenClaim
from cms.models import Comment, Post
from cms.models.base import utcnow
from cms.schemas.posts import PostCreateRequest, PostUpdateRequest
from cms.services.ownership import require_owner
from cms.services.pagination import clamp_limit, decode_cursor, encode_cursor

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found"
TITLE_AND_CONTENT_REQUIRED = "Title and content are required"
NO_FIELDS_TO_UPDATE = "No fields to update"
FORBIDDEN_UPDATE = "Forbidden: You can only update your own posts"
FORBIDDEN_DELETE = "Forbidden: You can only delete your own posts"

DEFAULT_PAGE_SIZE = 20


def get_post(db: Session, post_id: str) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFound(POST_NOT_FOUND)
    return post


def create_post(db: Session, claim: TokenClaim, body: PostCreateRequest) -> Post:
    if not body.title or not body.content:
        raise ValidationFailed(TITLE_AND_CONTENT_REQUIRED)
    now = utcnow()
    post = Post(
        user_id=claim.user_id,
        username=claim.username,
        title=body.title,
        content=body.content,
        tags=list(body.tags),
        status=body.status or "published",
        post_avatar_id=body.post_avatar_id,
        comment_count=0,
        created_at=now,
        updated_at=now,
    )
    db.add(post)
    db.commit()
    logger.info("Post created", extra={"post_id": post.post_id, "user_id": claim.user_id})
    return post


def list_posts(db: Session, limit: int | None, last_key: str | None) -> tuple[list[Post], str | None]:
    """Newest first. Returns the page and a cursor for the next one (None at the end)."""
    page_size = clamp_limit(limit, DEFAULT_PAGE_SIZE)
    query = db.query(Post)
    cursor = decode_cursor(last_key)
    if cursor is not None:
        created_at, post_id = cursor
        query = query.filter(
            or_(
                Post.created_at < created_at,
                and_(Post.created_at == created_at, Post.post_id < post_id),
            )
        )
    rows = query.order_by(Post.created_at.desc(), Post.post_id.desc()).limit(page_size + 1).all()
    page = rows[:page_size]
    next_key = None
    if len(rows) > page_size:
        next_key = encode_cursor(page[-1].created_at, page[-1].post_id)
    return page, next_key


def update_post(db: Session, claim: TokenClaim, post_id: str, body: PostUpdateRequest) -> Post:
    """Existence first, then ownership, then field validation."""
    post = get_post(db, post_id)
    require_owner(claim, post.user_id, FORBIDDEN_UPDATE)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationFailed(NO_FIELDS_TO_UPDATE)
    if "title" in changes and not changes["title"]:
        raise ValidationFailed(TITLE_AND_CONTENT_REQUIRED)
    if "content" in changes and not changes["content"]:
        raise ValidationFailed(TITLE_AND_CONTENT_REQUIRED)
    for field, value in changes.items():
        setattr(post, field, value)
    post.updated_at = utcnow()
    db.commit()
    return post


def delete_post(db: Session, claim: TokenClaim, post_id: str) -> str:
    """Delete the caller's post together with its comments in one transaction."""
    post = get_post(db, post_id)
    require_owner(claim, post.user_id, FORBIDDEN_DELETE)

    deleted_comments = (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .delete(synchronize_session=False)
    )
    db.delete(post)
    db.commit()
    logger.info(
        "Post deleted",
        extra={"post_id": post_id, "comments_deleted": deleted_comments},
    )
    return post_id
