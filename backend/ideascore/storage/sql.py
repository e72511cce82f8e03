"""Relational storage backed by the SQLAlchemy ORM."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from ..database import Database
from ..errors import ConflictError
from ..models import AuthSession, Idea, User
from ..schemas.auth_schema import UserRecord
from ..schemas.idea_schema import IdeaRecord
from .base import DUPLICATE_EMAIL, DUPLICATE_USERNAME, Storage

logger = logging.getLogger(__name__)


class SQLStorage(Storage):
    backend_name = "sql"

    def __init__(self, database: Database) -> None:
        self.db = database

    @classmethod
    def from_url(cls, url: str) -> "SQLStorage":
        return cls(Database(url))

    def init(self) -> None:
        self.db.create_all()

    def close(self) -> None:
        self.db.dispose()

    # ── Users ─────────────────────────────────────────────────────────

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        with self.db.session_scope() as session:
            user = session.query(User).filter(User.username == username).first()
            return UserRecord.model_validate(user) if user else None

    def get_user_by_id(self, user_id: UUID) -> Optional[UserRecord]:
        with self.db.session_scope() as session:
            user = session.get(User, user_id)
            return UserRecord.model_validate(user) if user else None

    def _get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self.db.session_scope() as session:
            user = session.query(User).filter(User.email == email).first()
            return UserRecord.model_validate(user) if user else None

    def _insert_user(self, user: UserRecord) -> UserRecord:
        row = User(
            id=user.id,
            username=user.username,
            email=user.email,
            hashed_password=user.hashed_password,
            first_name=user.first_name,
            last_name=user.last_name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        try:
            with self.db.session_scope() as session:
                session.add(row)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration
            logger.info("Duplicate user rejected by database: %s", exc.orig)
            if "email" in str(exc.orig).lower():
                raise ConflictError(DUPLICATE_EMAIL) from exc
            raise ConflictError(DUPLICATE_USERNAME) from exc
        return user

    def delete_user(self, user_id: UUID) -> bool:
        with self.db.session_scope() as session:
            user = session.get(User, user_id)
            if user is None:
                return False
            session.delete(user)
            return True

    # ── Ideas ─────────────────────────────────────────────────────────

    def get_ideas(self, user_id: UUID) -> list[IdeaRecord]:
        with self.db.session_scope() as session:
            rows = (
                session.query(Idea)
                .filter(Idea.user_id == user_id)
                .order_by(Idea.updated_at.desc(), Idea.created_at.desc())
                .all()
            )
            return [IdeaRecord.model_validate(row) for row in rows]

    def get_idea(self, user_id: UUID, idea_id: UUID) -> Optional[IdeaRecord]:
        with self.db.session_scope() as session:
            row = self._owned_idea(session, user_id, idea_id)
            return IdeaRecord.model_validate(row) if row else None

    def delete_idea(self, user_id: UUID, idea_id: UUID) -> bool:
        with self.db.session_scope() as session:
            deleted = (
                session.query(Idea)
                .filter(Idea.id == idea_id, Idea.user_id == user_id)
                .delete(synchronize_session=False)
            )
            return deleted > 0

    def _insert_idea(self, idea: IdeaRecord) -> None:
        with self.db.session_scope() as session:
            session.add(Idea(**idea.model_dump()))

    def _apply_idea_changes(
        self, user_id: UUID, idea_id: UUID, changes: Mapping[str, Any]
    ) -> Optional[IdeaRecord]:
        with self.db.session_scope() as session:
            row = self._owned_idea(session, user_id, idea_id)
            if row is None:
                return None
            for name, value in changes.items():
                setattr(row, name, value)
            session.flush()
            return IdeaRecord.model_validate(row)

    @staticmethod
    def _owned_idea(session, user_id: UUID, idea_id: UUID) -> Optional[Idea]:
        return (
            session.query(Idea)
            .filter(Idea.id == idea_id, Idea.user_id == user_id)
            .first()
        )

    # ── Sessions ──────────────────────────────────────────────────────

    def _insert_session(
        self, sid: str, user_id: UUID, expires_at: datetime, created_at: datetime
    ) -> None:
        with self.db.session_scope() as session:
            session.add(
                AuthSession(sid=sid, user_id=user_id, expires_at=expires_at, created_at=created_at)
            )

    def _load_session(self, sid: str) -> Optional[tuple[UUID, datetime]]:
        with self.db.session_scope() as session:
            row = session.get(AuthSession, sid)
            return (row.user_id, row.expires_at) if row else None

    def delete_session(self, sid: str) -> bool:
        with self.db.session_scope() as session:
            deleted = (
                session.query(AuthSession)
                .filter(AuthSession.sid == sid)
                .delete(synchronize_session=False)
            )
            return deleted > 0

    def purge_expired_sessions(self) -> int:
        with self.db.session_scope() as session:
            return (
                session.query(AuthSession)
                .filter(AuthSession.expires_at <= datetime.utcnow())
                .delete(synchronize_session=False)
            )
