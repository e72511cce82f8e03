"""FastAPI dependencies for session-based route protection."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request

from ..config import Settings, get_settings
from ..errors import AuthenticationError
from ..schemas.auth_schema import UserRecord
from ..storage import Storage, get_storage
from .auth_utils import read_session_id

logger = logging.getLogger(__name__)


def get_session_id(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """Return the verified session id from the cookie, or None."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    sid = read_session_id(token, settings.session_secret)
    if sid is None:
        logger.debug("Rejected session cookie with bad signature or expiry")
    return sid


def get_optional_user(
    sid: Optional[str] = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
) -> Optional[UserRecord]:
    """Resolve the session to a user.

    Returns None when there is no cookie, the session is unknown or expired,
    or its user no longer exists.
    """
    if sid is None:
        return None
    user_id = storage.get_session_user_id(sid)
    if user_id is None:
        return None
    return storage.get_user_by_id(user_id)


def get_current_user(
    user: Optional[UserRecord] = Depends(get_optional_user),
) -> UserRecord:
    """Require an authenticated user. Raises 401 otherwise."""
    if user is None:
        raise AuthenticationError("Authentication required")
    return user
