"""Authentication routes: register, login, logout, current user."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..errors import AuthenticationError
from ..schemas.auth_schema import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserPublic,
    UserRecord,
)
from ..services.auth_dependency import get_optional_user, get_session_id
from ..services.auth_utils import sign_session_id, verify_password
from ..storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])


# ===================================================================== #
#  Utility: session cookie helpers                                        #
# ===================================================================== #

def _user_public(user: UserRecord) -> UserPublic:
    return UserPublic.model_validate(user.model_dump())


def _start_session(response: Response, user: UserRecord, storage: Storage, settings: Settings) -> None:
    """Create a server-side session for *user* and set the signed cookie."""
    sid = storage.create_session(user.id, settings.session_ttl_seconds)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_id(sid, settings.session_secret, settings.session_ttl_seconds),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


# ===================================================================== #
#  Routes                                                                 #
# ===================================================================== #

@router.post(
    "/register",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new account and log in",
)
def register(
    payload: RegisterRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> UserPublic:
    """Create a local user (duplicate username or email -> 400) and open a session."""
    user = storage.create_user(payload)
    _start_session(response, user, storage, settings)
    logger.info("User registered: %s (%s)", user.username, user.id)
    return _user_public(user)


@router.post(
    "/login",
    response_model=UserPublic,
    summary="Log in with username and password",
)
def login(
    payload: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> UserPublic:
    """Verify credentials and establish a session."""
    user = storage.get_user_by_username(payload.username)
    if user is None or not verify_password(payload.password, user.hashed_password):
        logger.info("Failed login for username %r", payload.username)
        raise AuthenticationError("Invalid username or password")

    _start_session(response, user, storage, settings)
    logger.info("User logged in: %s (%s)", user.username, user.id)
    return _user_public(user)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Destroy the current session",
)
def logout(
    sid: Optional[str] = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """Delete the server-side session and clear the cookie."""
    if sid is not None:
        try:
            storage.delete_session(sid)
        except Exception:
            logger.exception("Logout error: could not destroy session")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": "Could not log out"},
            )

    response = JSONResponse(content={"message": "Logged out successfully"})
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.get("/user", response_model=UserPublic, summary="Get current user")
def get_me(user: Optional[UserRecord] = Depends(get_optional_user)) -> UserPublic:
    """Return the authenticated user's public profile."""
    if user is None:
        raise AuthenticationError("Not authenticated")
    return _user_public(user)
