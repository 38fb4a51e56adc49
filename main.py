"""VidTube - Main application entry point."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from vidtube.api import (
    comments_router,
    health_router,
    likes_router,
    playlists_router,
    subscriptions_router,
    tweets_router,
    users_router,
    videos_router,
)
from vidtube.api.dependencies import limiter
from vidtube.api.responses import install_exception_handlers
from vidtube.auth.router import router as auth_router
from vidtube.config import get_settings
from vidtube.db.session import init_db
from vidtube.logging import setup_logging
from vidtube.media import MediaHostClient

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Prevent clickjacking attacks
        response.headers["X-Frame-Options"] = "DENY"

        # JSON API: nothing should be loaded or framed from responses
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none'"
        )

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request with its status and timing."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 1)

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else None,
            },
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    settings = get_settings()
    setup_logging()
    await init_db()
    app.state.media_host = MediaHostClient(settings)
    if not app.state.media_host.is_configured():
        logger.warning("Media host credentials are missing; uploads will fail")
    logger.info(f"VidTube starting (env={settings.env})")
    yield
    logger.info("VidTube shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="VidTube",
        description="Backend for a video sharing platform",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure rate limiting
    app.state.limiter = limiter

    install_exception_handlers(app)

    # Add security headers middleware
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLogMiddleware)

    # Cookies carry the session, so credentials must be allowed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(videos_router)
    app.include_router(comments_router)
    app.include_router(likes_router)
    app.include_router(tweets_router)
    app.include_router(playlists_router)
    app.include_router(subscriptions_router)

    return app


app = create_app()


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().env == "dev",
    )


if __name__ == "__main__":
    main()
