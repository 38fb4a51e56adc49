"""FastAPI dependencies resolving the caller from the access token."""

from typing import Annotated

from fastapi import Cookie, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.auth.security import ACCESS, decode_token
from vidtube.config import get_settings
from vidtube.db import crud
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.errors import Unauthorized

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


async def _resolve(
    db: AsyncSession, cookie_token: str | None, authorization: str | None
) -> User | None:
    token = cookie_token or _bearer(authorization)
    if not token:
        return None
    user_id = decode_token(token, get_settings().access_token_secret, ACCESS)
    if not user_id:
        return None
    return await crud.get_user_by_id(db, user_id)


async def require_user(
    access_cookie: Annotated[str | None, Cookie(alias=ACCESS_COOKIE)] = None,
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    FastAPI dependency that requires a valid authenticated user.

    The access token is read from the ``accessToken`` cookie, falling back to
    an ``Authorization: Bearer`` header.

    Raises:
        Unauthorized: If the token is missing, invalid, expired or orphaned
    """
    if not access_cookie and not _bearer(authorization):
        raise Unauthorized("Unauthorized request")

    user = await _resolve(db, access_cookie, authorization)
    if user is None:
        raise Unauthorized("Invalid access token")
    return user


async def optional_viewer(
    access_cookie: Annotated[str | None, Cookie(alias=ACCESS_COOKIE)] = None,
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_session),
) -> User | None:
    """Like require_user, but anonymous or invalid credentials yield None."""
    return await _resolve(db, access_cookie, authorization)
