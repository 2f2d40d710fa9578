"""API routes."""

from fastapi import APIRouter

from cms.api import auth, comments, health, posts, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(comments.router, prefix="/posts", tags=["comments"])
router.include_router(users.router, prefix="/admin/users", tags=["users"])
