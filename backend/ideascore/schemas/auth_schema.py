"""Authentication request/response schemas."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel


# ---------------------------------------------------------------------------
# Password policy
# ---------------------------------------------------------------------------
COMMON_PASSWORDS = {
    "password", "password1", "123456", "12345678", "123456789",
    "qwerty", "abc123", "letmein", "welcome", "admin",
    "monkey", "master", "dragon", "login", "princess",
    "football", "shadow", "sunshine", "trustno1", "iloveyou",
}

_PW_MIN_LENGTH = 8
_PW_RULES = [
    (r"[A-Za-z]", "one letter"),
    (r"[0-9]", "one number"),
]


def validate_password_strength(password: str) -> str:
    """Validate password meets strength requirements. Returns password or raises ValueError."""
    errors: list[str] = []
    if len(password) < _PW_MIN_LENGTH:
        errors.append(f"at least {_PW_MIN_LENGTH} characters")
    for pattern, label in _PW_RULES:
        if not re.search(pattern, password):
            errors.append(label)
    # Check if the password (or its alphabetic core) is a common password
    pw_lower = password.lower()
    pw_alpha = re.sub(r"[^a-z]", "", pw_lower)
    if pw_lower in COMMON_PASSWORDS or pw_alpha in COMMON_PASSWORDS:
        errors.append("not be a common password")
    if errors:
        raise ValueError(
            f"Password must contain {', '.join(errors)}."
        )
    return password


# ---------------------------------------------------------------------------
# Username policy
# ---------------------------------------------------------------------------
_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]{3,20}$")


def validate_username(username: str) -> str:
    """Validate username: 3-20 chars, letters/numbers/underscores only."""
    if not _USERNAME_RE.match(username):
        raise ValueError(
            "Username must be 3-20 characters and contain only letters, numbers, or underscores."
        )
    return username


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------

class RegisterRequest(CamelModel):
    username: str = Field(..., description="Unique username (3-20 chars, alphanumeric + underscore)")
    password: str = Field(..., description="At least 8 characters with a letter and a number")
    email: Optional[EmailStr] = Field(None, description="Optional contact email")
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return validate_username(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., min_length=1, description="Password")


class UserPublic(CamelModel):
    id: UUID
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserRecord(UserPublic):
    """Stored user, including the password hash. Never returned as-is."""

    hashed_password: str = Field(..., exclude=True, repr=False)


class MessageResponse(CamelModel):
    message: str
