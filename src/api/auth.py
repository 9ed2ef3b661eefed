"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from src.api.dependencies import get_auth_providers
from src.config import get_settings
from src.database import get_db
from src.errors import BadRequestError, NotFoundError, UnauthorizedError, storage_guard
from src.models.user import User
from src.schemas.auth import AccessTokenResponse, AuthResponse, UserLogin, UserResponse, UserSignup
from src.services.auth import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    create_user,
    decode_refresh_token,
    find_or_create_external_user,
    get_user_by_email,
    get_user_by_id,
)
from src.services.oauth import AuthProviders, OAuthError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

REFRESH_COOKIE = "jwt"


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=settings.refresh_token_expiration_minutes * 60,
        httponly=True,
        secure=not settings.is_development,
        samesite="lax" if settings.is_development else "none",
    )


def _auth_response(user: User, response: Response) -> AuthResponse:
    access_token, expires_in = create_access_token(user.id)
    refresh_token = create_refresh_token(user.id)
    _set_refresh_cookie(response, refresh_token)
    return AuthResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=expires_in,
        user=UserResponse.model_validate(user),
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user with email and password."""
    if get_user_by_email(db, user_data.email):
        raise BadRequestError("Email already registered")

    with storage_guard(db, "Can't register new user, something went wrong"):
        user = create_user(db, user_data.email, user_data.password, user_data.full_name)

    return _auth_response(user, response)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise UnauthorizedError("Wrong credentials, please try again")

    return _auth_response(user, response)


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(
    db: Annotated[Session, Depends(get_db)],
    jwt: Annotated[str | None, Cookie()] = None,
):
    """Issue a new access token from the refresh token cookie."""
    payload = decode_refresh_token(jwt) if jwt else None
    if payload is None or get_user_by_id(db, str(payload.get("sub"))) is None:
        raise UnauthorizedError("Wrong refresh token")

    access_token, expires_in = create_access_token(str(payload["sub"]))
    return AccessTokenResponse(access_token=access_token, expires_in=expires_in)


@router.get("/login/{provider}")
async def login_with_provider(
    provider: str,
    providers: Annotated[AuthProviders, Depends(get_auth_providers)],
):
    """Redirect to the identity provider's consent screen."""
    if provider not in providers:
        raise NotFoundError("Login provider not found")
    return RedirectResponse(providers[provider].authorization_url())


@router.get("/{provider}/callback", response_model=AccessTokenResponse)
async def provider_callback(
    provider: str,
    response: Response,
    providers: Annotated[AuthProviders, Depends(get_auth_providers)],
    db: Annotated[Session, Depends(get_db)],
    code: str | None = None,
):
    """Finish an OAuth login: find or create the user and issue tokens."""
    if provider not in providers:
        raise NotFoundError("Login provider not found")

    settings = get_settings()
    if not code:
        return RedirectResponse(settings.login_error_url)

    try:
        identity = await providers[provider].fetch_identity(code)
    except OAuthError as e:
        logger.error(f"{provider} login failed: {e}")
        return RedirectResponse(settings.login_error_url)

    with storage_guard(db, f"Cannot login using {provider}, try again later"):
        user = find_or_create_external_user(db, identity)

    access_token, expires_in = create_access_token(user.id)
    _set_refresh_cookie(response, create_refresh_token(user.id))
    return AccessTokenResponse(access_token=access_token, expires_in=expires_in)
