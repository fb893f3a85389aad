"""
Main FastAPI application module.

This module initializes the FastAPI application for the local code review
server: a REST API over one git repository plus the SQLite review store.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import api_router
from app.core.config import Settings, get_settings
from app.core.exceptions import CodeReviewerException
from app.core.logging_config import get_logger, setup_logging

# Initialize logging
setup_logging()
logger = get_logger(__name__)


async def code_reviewer_exception_handler(
    request: Request, exc: CodeReviewerException
) -> JSONResponse:
    """Render application exceptions as ``{"error", "code"}`` with their status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": type(exc).__name__},
    )


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    Args:
        settings: Application settings, defaults to the cached singleton

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()

    application = FastAPI(
        title="Local Code Review API",
        description="Diffs, reviews and comments for a local git repository",
        version="1.0.0",
    )

    # The UI is served from another local port during development
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(CodeReviewerException, code_reviewer_exception_handler)
    application.include_router(api_router)

    logger.info(f"Serving code review for {settings.REPOSITORY_PATH}")
    return application


# Create the FastAPI application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info(f"Starting code review server on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
