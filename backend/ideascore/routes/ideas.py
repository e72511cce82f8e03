"""Idea routes: submit, list, read, update and delete the caller's ideas.

Every route is scoped to the authenticated user. An idea owned by someone
else is reported exactly like a missing one (404).
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ..errors import NotFoundError
from ..schemas.auth_schema import UserRecord
from ..schemas.idea_schema import IdeaCreate, IdeaRecord, IdeaResponse, IdeaUpdate
from ..services.auth_dependency import get_current_user
from ..storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/ideas",
    tags=["Ideas"],
)


# ── Helpers ──────────────────────────────────────────────────────────────

def _to_response(record: IdeaRecord) -> IdeaResponse:
    return IdeaResponse.model_validate(record.model_dump())


def _parse_idea_id(idea_id: str) -> UUID:
    """Ids that are not UUIDs cannot exist, so they are simply not found."""
    try:
        return UUID(idea_id)
    except ValueError:
        raise NotFoundError("Idea not found") from None


# ── Routes ───────────────────────────────────────────────────────────────

@router.post(
    "",
    response_model=IdeaResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a Startup Idea",
    response_description="The stored idea with its viability score and feedback",
)
def create_idea(
    payload: IdeaCreate,
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user),
) -> IdeaResponse:
    """Validate, score and persist an idea for the current user."""
    idea = storage.create_idea(current_user.id, payload.model_dump())
    return _to_response(idea)


@router.get(
    "",
    response_model=list[IdeaResponse],
    summary="List my ideas",
)
def list_ideas(
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user),
) -> list[IdeaResponse]:
    """All of the caller's ideas, most recently updated first."""
    return [_to_response(idea) for idea in storage.get_ideas(current_user.id)]


@router.get(
    "/{idea_id}",
    response_model=IdeaResponse,
    summary="Get one idea",
)
def get_idea(
    idea_id: str,
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user),
) -> IdeaResponse:
    idea = storage.get_idea(current_user.id, _parse_idea_id(idea_id))
    if idea is None:
        raise NotFoundError("Idea not found")
    return _to_response(idea)


@router.put(
    "/{idea_id}",
    response_model=IdeaResponse,
    summary="Update an idea",
)
def update_idea(
    idea_id: str,
    payload: IdeaUpdate,
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user),
) -> IdeaResponse:
    """Apply a partial update. Changing any scored field triggers a rescore."""
    updates = payload.model_dump(exclude_unset=True)
    idea = storage.update_idea(current_user.id, _parse_idea_id(idea_id), updates)
    if idea is None:
        raise NotFoundError("Idea not found")
    logger.info("Idea %s updated by user %s (fields: %s)", idea.id, current_user.id, ", ".join(sorted(updates)) or "none")
    return _to_response(idea)


@router.delete(
    "/{idea_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an idea",
)
def delete_idea(
    idea_id: str,
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user),
) -> Response:
    if not storage.delete_idea(current_user.id, _parse_idea_id(idea_id)):
        raise NotFoundError("Idea not found")
    logger.info("Idea %s deleted by user %s", idea_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
