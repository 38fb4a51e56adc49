"""FastAPI router for registration, login, logout and token refresh."""

import logging

from fastapi import APIRouter, Cookie, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_media_host, limiter, max_upload_bytes
from vidtube.api.responses import api_response, error_response
from vidtube.auth import sessions
from vidtube.auth.dependencies import ACCESS_COOKIE, REFRESH_COOKIE, require_user
from vidtube.config import get_settings
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.errors import Unauthorized
from vidtube.handlers.users import register_user
from vidtube.media import MediaHostClient, staged_uploads
from vidtube.schemas import LoginRequest, RefreshRequest, TokenPair

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["auth"])


def _set_session_cookies(response: JSONResponse, pair: TokenPair) -> JSONResponse:
    settings = get_settings()
    is_prod = settings.env == "prod"
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=pair.access_token,
        httponly=True,
        samesite="lax",
        secure=is_prod,
        max_age=settings.access_token_expiry_minutes * 60,
    )
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=pair.refresh_token,
        httponly=True,
        samesite="lax",
        secure=is_prod,
        max_age=settings.refresh_token_expiry_days * 86400,
    )
    return response


def _clear_session_cookies(response: JSONResponse) -> JSONResponse:
    is_prod = get_settings().env == "prod"
    for key in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(key=key, httponly=True, samesite="lax", secure=is_prod)
    return response


@router.post("/register")
@limiter.limit("10/minute")
async def register(
    request: Request,
    full_name: str | None = Form(None, alias="fullName"),
    email: str | None = Form(None),
    username: str | None = Form(None),
    password: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None, alias="coverImage"),
    db: AsyncSession = Depends(get_session),
    media: MediaHostClient = Depends(get_media_host),
):
    """
    Create an account.

    Multipart form with fullName, email, username, password, a required
    avatar image and an optional coverImage.

    Rate limit: 10 requests per minute per IP.
    """
    settings = get_settings()
    async with staged_uploads(
        {"avatar": avatar, "coverImage": cover_image},
        settings.upload_tmp_dir,
        max_upload_bytes(),
    ) as staged:
        user = await register_user(
            db,
            media,
            username=username,
            email=email,
            full_name=full_name,
            password=password,
            avatar_path=staged["avatar"],
            cover_image_path=staged["coverImage"],
        )
    return api_response(user, "User registered successfully", 201)


@router.post("/login")
@limiter.limit("10/minute")
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
):
    """
    Log in with username or email and password.

    Sets the accessToken and refreshToken cookies and also returns both
    tokens in the body for clients that cannot use cookies.

    Rate limit: 10 requests per minute per IP.
    """
    result = await sessions.login(
        db, get_settings(), body.username, body.email, body.password
    )
    response = api_response(result, "User logged in successfully")
    pair = TokenPair(access_token=result.access_token, refresh_token=result.refresh_token)
    return _set_session_cookies(response, pair)


@router.post("/logout")
@limiter.limit("20/minute")
async def logout(
    request: Request,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    """Invalidate the stored refresh token and clear both cookies."""
    await sessions.logout(db, user)
    return _clear_session_cookies(api_response({}, "User logged out successfully"))


@router.post("/refresh-token")
@limiter.limit("30/minute")
async def refresh_token(
    request: Request,
    body: RefreshRequest | None = None,
    refresh_cookie: str | None = Cookie(None, alias=REFRESH_COOKIE),
    db: AsyncSession = Depends(get_session),
):
    """
    Rotate the token pair.

    The refresh token is taken from the refreshToken cookie or the request
    body. A rejected token also clears the session cookies.
    """
    token = refresh_cookie or (body.refresh_token if body else None)
    try:
        pair = await sessions.refresh_session(db, get_settings(), token)
    except Unauthorized as e:
        return _clear_session_cookies(error_response(e.status_code, e.message))

    response = api_response(pair, "Access token refreshed")
    return _set_session_cookies(response, pair)
