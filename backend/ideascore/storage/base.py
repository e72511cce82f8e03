"""Storage contract shared by every persistence backend.

``Storage`` implements the repository rules once (scoring on create/update,
owner scoping, password hashing, session expiry) and leaves the raw reads
and writes to the adapters. Adapters never compute scores themselves.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional
from uuid import UUID, uuid4

from ..errors import ConflictError, ValidationError
from ..schemas.auth_schema import RegisterRequest, UserRecord
from ..schemas.idea_schema import IdeaRecord, check_min_length
from ..services.auth_utils import hash_password, new_session_id
from ..services.scoring_engine import SCORED_FIELDS, score_idea

logger = logging.getLogger(__name__)

CONTENT_FIELDS: tuple[str, ...] = ("title",) + SCORED_FIELDS
UPDATABLE_FIELDS: frozenset[str] = frozenset(CONTENT_FIELDS + ("status", "is_bookmarked"))

DUPLICATE_USERNAME = "Username already exists"
DUPLICATE_EMAIL = "An account with this email already exists"


def _validated_content(fields: Mapping[str, Any], names) -> dict[str, str]:
    content = {}
    for name in names:
        try:
            content[name] = check_min_length(name, fields.get(name))
        except ValueError as exc:
            raise ValidationError(str(exc)) from None
    return content


class Storage(ABC):
    """Persistence for users, ideas and login sessions.

    Every idea operation takes the caller's ``user_id``; an idea owned by
    someone else behaves exactly like one that does not exist.
    """

    backend_name: str = "abstract"

    # ── Lifecycle ─────────────────────────────────────────────────────

    def init(self) -> None:
        """Prepare the backend (create tables, open pools)."""

    def close(self) -> None:
        """Release backend resources."""

    # ── Users ─────────────────────────────────────────────────────────

    def create_user(self, data: RegisterRequest) -> UserRecord:
        """Hash the password and persist a new user.

        Raises ``ConflictError`` if the username (or a non-empty email) is
        already taken.
        """
        if self.get_user_by_username(data.username) is not None:
            raise ConflictError(DUPLICATE_USERNAME)
        email = str(data.email) if data.email else None
        if email and self._get_user_by_email(email) is not None:
            raise ConflictError(DUPLICATE_EMAIL)

        now = datetime.utcnow()
        user = UserRecord(
            id=uuid4(),
            username=data.username,
            email=email,
            first_name=data.first_name,
            last_name=data.last_name,
            hashed_password=hash_password(data.password),
            created_at=now,
            updated_at=now,
        )
        return self._insert_user(user)

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[UserRecord]: ...

    @abstractmethod
    def get_user_by_id(self, user_id: UUID) -> Optional[UserRecord]: ...

    @abstractmethod
    def delete_user(self, user_id: UUID) -> bool:
        """Remove a user together with their ideas and sessions."""

    @abstractmethod
    def _get_user_by_email(self, email: str) -> Optional[UserRecord]: ...

    @abstractmethod
    def _insert_user(self, user: UserRecord) -> UserRecord:
        """Persist *user*; raise ``ConflictError`` on a uniqueness violation."""

    # ── Ideas ─────────────────────────────────────────────────────────

    def create_idea(self, user_id: UUID, fields: Mapping[str, Any]) -> IdeaRecord:
        """Score and persist a new idea owned by *user_id*.

        Raises ``ValidationError`` if a content field is missing or too short.
        """
        content = _validated_content(fields, CONTENT_FIELDS)
        result = score_idea({name: content[name] for name in SCORED_FIELDS})
        now = datetime.utcnow()
        idea = IdeaRecord(
            id=uuid4(),
            user_id=user_id,
            **content,
            viability_score=result.viability_score,
            feedback=result.feedback,
            status="completed",
            is_bookmarked=bool(fields.get("is_bookmarked", False)),
            created_at=now,
            updated_at=now,
        )
        self._insert_idea(idea)
        logger.info("Idea %s created for user %s (score=%d)", idea.id, user_id, idea.viability_score)
        return idea

    @abstractmethod
    def get_ideas(self, user_id: UUID) -> list[IdeaRecord]:
        """All ideas owned by *user_id*, most recently updated first."""

    @abstractmethod
    def get_idea(self, user_id: UUID, idea_id: UUID) -> Optional[IdeaRecord]: ...

    def update_idea(
        self, user_id: UUID, idea_id: UUID, updates: Mapping[str, Any]
    ) -> Optional[IdeaRecord]:
        """Merge *updates* onto an owned idea.

        Rescoring uses the merged field set and happens only when a scored
        field is part of the update. ``updated_at`` is always bumped.
        Returns None when the idea is missing or not owned by *user_id*.
        Raises ``ValidationError`` for a content field that is too short.
        """
        existing = self.get_idea(user_id, idea_id)
        if existing is None:
            return None

        changes: dict[str, Any] = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
        changes.update(_validated_content(changes, [name for name in CONTENT_FIELDS if name in changes]))
        if any(name in changes for name in SCORED_FIELDS):
            merged = {name: changes.get(name, getattr(existing, name)) for name in SCORED_FIELDS}
            result = score_idea(merged)
            changes["viability_score"] = result.viability_score
            changes["feedback"] = result.feedback
            logger.info("Idea %s rescored: %s -> %d", idea_id, existing.viability_score, result.viability_score)
        changes["updated_at"] = datetime.utcnow()

        return self._apply_idea_changes(user_id, idea_id, changes)

    @abstractmethod
    def delete_idea(self, user_id: UUID, idea_id: UUID) -> bool:
        """Delete an owned idea. True only if a record was actually removed."""

    @abstractmethod
    def _insert_idea(self, idea: IdeaRecord) -> None: ...

    @abstractmethod
    def _apply_idea_changes(
        self, user_id: UUID, idea_id: UUID, changes: Mapping[str, Any]
    ) -> Optional[IdeaRecord]:
        """Write *changes* to an owned idea and return the stored result."""

    # ── Sessions ──────────────────────────────────────────────────────

    def create_session(self, user_id: UUID, ttl_seconds: int) -> str:
        """Open a login session for *user_id* and return its id."""
        sid = new_session_id()
        now = datetime.utcnow()
        self._insert_session(sid, user_id, now + timedelta(seconds=ttl_seconds), now)
        return sid

    def get_session_user_id(self, sid: str) -> Optional[UUID]:
        """Resolve a live session to its user id. Expired sessions are removed."""
        found = self._load_session(sid)
        if found is None:
            return None
        user_id, expires_at = found
        if expires_at <= datetime.utcnow():
            self.delete_session(sid)
            return None
        return user_id

    @abstractmethod
    def delete_session(self, sid: str) -> bool: ...

    @abstractmethod
    def purge_expired_sessions(self) -> int:
        """Delete every expired session; return how many were removed."""

    @abstractmethod
    def _insert_session(
        self, sid: str, user_id: UUID, expires_at: datetime, created_at: datetime
    ) -> None: ...

    @abstractmethod
    def _load_session(self, sid: str) -> Optional[tuple[UUID, datetime]]: ...
