"""FastAPI dependencies shared by the API routers."""

from fastapi import Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from vidtube.config import get_settings
from vidtube.media import MediaHostClient

# One limiter for every router, registered on app.state by the app factory
limiter = Limiter(key_func=get_remote_address)


def get_media_host(request: Request) -> MediaHostClient:
    """Dependency returning the process-wide media host client.

    The client is created in the app lifespan; it is built lazily here for
    apps started without one.
    """
    media = getattr(request.app.state, "media_host", None)
    if media is None:
        media = MediaHostClient(get_settings())
        request.app.state.media_host = media
    return media


def pagination(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> tuple[int, int]:
    """Page number and page size, with the size clamped to the configured maximum."""
    settings = get_settings()
    size = limit or settings.page_size_default
    return page, min(size, settings.page_size_max)


def max_upload_bytes() -> int:
    return get_settings().max_upload_mb * 1024 * 1024
