"""In-process document store.

Keeps whole records in dictionaries keyed by id, the way a document database
would keep one document per user/idea/session. Useful for local runs and
tests; data is lost when the process exits.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID

from ..errors import ConflictError
from ..schemas.auth_schema import UserRecord
from ..schemas.idea_schema import IdeaRecord
from .base import DUPLICATE_EMAIL, DUPLICATE_USERNAME, Storage


class MemoryStorage(Storage):
    backend_name = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[UUID, UserRecord] = {}
        self._ideas: dict[UUID, IdeaRecord] = {}
        self._sessions: dict[str, tuple[UUID, datetime]] = {}

    def close(self) -> None:
        with self._lock:
            self._users.clear()
            self._ideas.clear()
            self._sessions.clear()

    # ── Users ─────────────────────────────────────────────────────────

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy()
        return None

    def get_user_by_id(self, user_id: UUID) -> Optional[UserRecord]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy() if user else None

    def _get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user.model_copy()
        return None

    def _insert_user(self, user: UserRecord) -> UserRecord:
        with self._lock:
            for existing in self._users.values():
                if existing.username == user.username:
                    raise ConflictError(DUPLICATE_USERNAME)
                if user.email and existing.email == user.email:
                    raise ConflictError(DUPLICATE_EMAIL)
            self._users[user.id] = user.model_copy()
        return user

    def delete_user(self, user_id: UUID) -> bool:
        with self._lock:
            if self._users.pop(user_id, None) is None:
                return False
            self._ideas = {k: v for k, v in self._ideas.items() if v.user_id != user_id}
            self._sessions = {k: v for k, v in self._sessions.items() if v[0] != user_id}
            return True

    # ── Ideas ─────────────────────────────────────────────────────────

    def get_ideas(self, user_id: UUID) -> list[IdeaRecord]:
        with self._lock:
            owned = [idea.model_copy() for idea in self._ideas.values() if idea.user_id == user_id]
        owned.sort(key=lambda idea: (idea.updated_at, idea.created_at), reverse=True)
        return owned

    def get_idea(self, user_id: UUID, idea_id: UUID) -> Optional[IdeaRecord]:
        with self._lock:
            idea = self._ideas.get(idea_id)
            if idea is None or idea.user_id != user_id:
                return None
            return idea.model_copy()

    def delete_idea(self, user_id: UUID, idea_id: UUID) -> bool:
        with self._lock:
            idea = self._ideas.get(idea_id)
            if idea is None or idea.user_id != user_id:
                return False
            del self._ideas[idea_id]
            return True

    def _insert_idea(self, idea: IdeaRecord) -> None:
        with self._lock:
            self._ideas[idea.id] = idea.model_copy()

    def _apply_idea_changes(
        self, user_id: UUID, idea_id: UUID, changes: Mapping[str, Any]
    ) -> Optional[IdeaRecord]:
        with self._lock:
            idea = self._ideas.get(idea_id)
            if idea is None or idea.user_id != user_id:
                return None
            updated = idea.model_copy(update=dict(changes))
            self._ideas[idea_id] = updated
            return updated.model_copy()

    # ── Sessions ──────────────────────────────────────────────────────

    def _insert_session(
        self, sid: str, user_id: UUID, expires_at: datetime, created_at: datetime
    ) -> None:
        with self._lock:
            self._sessions[sid] = (user_id, expires_at)

    def _load_session(self, sid: str) -> Optional[tuple[UUID, datetime]]:
        with self._lock:
            return self._sessions.get(sid)

    def delete_session(self, sid: str) -> bool:
        with self._lock:
            return self._sessions.pop(sid, None) is not None

    def purge_expired_sessions(self) -> int:
        now = datetime.utcnow()
        with self._lock:
            expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
            for sid in expired:
                del self._sessions[sid]
        return len(expired)
