"""Authentication and session handling for VidTube."""

from vidtube.auth.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    optional_viewer,
    require_user,
)

__all__ = ["ACCESS_COOKIE", "REFRESH_COOKIE", "optional_viewer", "require_user"]
