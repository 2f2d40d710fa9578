"""
Global exception handlers: every failure leaves the API as {"error": message}.

CmsError subclasses carry their own status; request validation errors become 400;
anything unexpected reaches unexpected_error_response (called from the
CORS-aware middleware in cms.main) and is answered with an opaque 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cms.core.errors import CmsError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"
INVALID_REQUEST_BODY = "Invalid request body"
INVALID_REQUEST = "Invalid request"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(CmsError)
    async def cms_error_handler(request: Request, exc: CmsError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("CmsError on %s: %s", request.url.path, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Field locations only; input values may hold passwords.
        logger.info(
            "Validation error on %s",
            request.url.path,
            extra={"fields": [".".join(str(p) for p in e.get("loc", ())) for e in exc.errors()]},
        )
        in_body = any(tuple(e.get("loc", ()))[:1] == ("body",) for e in exc.errors())
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            INVALID_REQUEST_BODY if in_body else INVALID_REQUEST,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))


def unexpected_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for errors no handler claimed; logs the traceback, never leaks details."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
