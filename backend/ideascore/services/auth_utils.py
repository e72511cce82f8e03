"""Authentication utilities: password hashing and session cookie signing.

Rules
-----
- NO hardcoded secrets in call sites; the signing secret comes from settings
- Secure password hashing with bcrypt (never fewer than 10 rounds)
- The cookie carries only the signed session id; session state lives server-side
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------
MIN_BCRYPT_ROUNDS = 10

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def configure_password_hashing(rounds: int) -> None:
    """Set the bcrypt cost factor used for new hashes."""
    rounds = max(MIN_BCRYPT_ROUNDS, rounds)
    pwd_context.update(bcrypt__rounds=rounds)
    logger.debug("bcrypt rounds set to %d", rounds)


def hash_password(password: str) -> str:
    """Hash a plaintext password."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plaintext password against a hash."""
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # Malformed or unknown hash format
        logger.warning("Password hash could not be verified (unrecognized format)")
        return False


# ---------------------------------------------------------------------------
# Session ids and cookie tokens
# ---------------------------------------------------------------------------
_SESSION_ALGORITHM = "HS256"


def new_session_id() -> str:
    """Return a fresh random, URL-safe session id."""
    return secrets.token_urlsafe(32)


def sign_session_id(session_id: str, secret: str, ttl_seconds: int) -> str:
    """Wrap *session_id* in a signed token suitable for a cookie value."""
    expire = datetime.utcnow() + timedelta(seconds=ttl_seconds)
    payload = {
        "sid": session_id,
        "purpose": "session",
        "exp": expire,
    }
    return jwt.encode(payload, secret, algorithm=_SESSION_ALGORITHM)


def read_session_id(token: str, secret: str) -> Optional[str]:
    """Verify a cookie token and return the session id, or None if invalid/expired."""
    try:
        payload = jwt.decode(token, secret, algorithms=[_SESSION_ALGORITHM])
    except JWTError:
        return None
    if payload.get("purpose") != "session":
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None
