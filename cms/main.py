"""FastAPI application factory. No business logic; only wiring, middleware and error shaping."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from cms.api import router as api_router
from cms.api.error_handlers import register_error_handlers, unexpected_error_response
from cms.core.config import Settings, get_settings
from cms.core.database import Database
from cms.core.log import configure_logging

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["Content-Type", "Authorization", "x-user-id"]
CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def allowed_origin(settings: Settings, origin: str | None) -> str | None:
    """Value for Access-Control-Allow-Origin, or None when the origin is not allowed."""
    if "*" in settings.CORS_ALLOW_ORIGINS:
        return "*"
    return origin if origin in settings.CORS_ALLOW_ORIGINS else None


def preflight_headers(settings: Settings, origin: str | None) -> dict[str, str]:
    allow_origin = allowed_origin(settings, origin)
    headers = {
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Max-Age": "600",
    }
    if allow_origin:
        headers["Access-Control-Allow-Origin"] = allow_origin
    return headers


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the API. The store handle is created once here (or injected by
    tests), kept on app.state, and disposed when the app shuts down.
    """
    if settings is None:
        settings = get_settings()
    configure_logging(settings)
    if database is None:
        database = Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("CMS API starting", extra={"environment": settings.APP_ENV})
        yield
        database.dispose()

    app = FastAPI(
        title="TXT-ME CMS API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )
    register_error_handlers(app)

    @app.middleware("http")
    async def answer_preflight(request: Request, call_next):
        """
        Any OPTIONS request gets an empty 204 with the CORS headers, whether or
        not it is a CORS preflight. Unhandled errors become the opaque 500 here,
        outside CORSMiddleware, so the allow-origin header is added explicitly.
        """
        origin = request.headers.get("origin")
        if request.method == "OPTIONS":
            return Response(
                status_code=status.HTTP_204_NO_CONTENT,
                headers=preflight_headers(settings, origin),
            )
        try:
            return await call_next(request)
        except Exception as exc:
            response = unexpected_error_response(request, exc)
            allow_origin = allowed_origin(settings, origin)
            if allow_origin:
                response.headers["Access-Control-Allow-Origin"] = allow_origin
                if allow_origin != "*":
                    response.headers["Vary"] = "Origin"
            return response

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", include_in_schema=False)
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "TXT-ME CMS API"}

    return app


def build_app() -> FastAPI:
    """uvicorn factory entrypoint: `uvicorn cms.main:build_app --factory`."""
    load_dotenv()
    return create_app()
