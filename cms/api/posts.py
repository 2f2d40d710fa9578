"""Post routes. Mutations require a token and ownership."""

from fastapi import APIRouter, Query, status

from cms.api.auth import CurrentUser
from cms.api.deps import DbSession
from cms.schemas.posts import (
    PostCreateRequest,
    PostDeleteResponse,
    PostMutationResponse,
    PostOut,
    PostResponse,
    PostsListResponse,
    PostUpdateRequest,
)
from cms.services import posts

router = APIRouter()


@router.get("", response_model=PostsListResponse)
def list_posts(
    db: DbSession,
    limit: int | None = Query(default=None, ge=1),
    last_key: str | None = Query(default=None, alias="lastKey"),
) -> PostsListResponse:
    page, next_key = posts.list_posts(db, limit, last_key)
    return PostsListResponse(posts=[PostOut.model_validate(p) for p in page], last_key=next_key)


@router.post("", response_model=PostMutationResponse, status_code=status.HTTP_201_CREATED)
def create_post(body: PostCreateRequest, claim: CurrentUser, db: DbSession) -> PostMutationResponse:
    post = posts.create_post(db, claim, body)
    return PostMutationResponse(message="Post created successfully", post=PostOut.model_validate(post))


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: str, db: DbSession) -> PostResponse:
    return PostResponse(post=PostOut.model_validate(posts.get_post(db, post_id)))


@router.put("/{post_id}", response_model=PostMutationResponse)
def update_post(
    post_id: str,
    body: PostUpdateRequest,
    claim: CurrentUser,
    db: DbSession,
) -> PostMutationResponse:
    post = posts.update_post(db, claim, post_id, body)
    return PostMutationResponse(message="Post updated successfully", post=PostOut.model_validate(post))


@router.delete("/{post_id}", response_model=PostDeleteResponse)
def delete_post(post_id: str, claim: CurrentUser, db: DbSession) -> PostDeleteResponse:
    """404 if missing, 403 if not the owner; comments of the post are removed too."""
    deleted_id = posts.delete_post(db, claim, post_id)
    return PostDeleteResponse(
        message="Post and associated comments deleted successfully",
        post_id=deleted_id,
    )
