from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import computed_field, field_validator

from ..services.scoring_engine import parse_feedback
from .common import CamelModel

IdeaStatus = Literal["draft", "completed", "archived"]

# (minimum length, message) per content field; title only needs to be non-blank.
MIN_LENGTHS: dict[str, tuple[int, str]] = {
    "title": (1, "Title is required"),
    "problem": (10, "Problem description must be at least 10 characters"),
    "solution": (10, "Solution description must be at least 10 characters"),
    "target_market": (5, "Target market must be at least 5 characters"),
    "team": (5, "Team description must be at least 5 characters"),
    "business_model": (10, "Business model must be at least 10 characters"),
    "competition": (10, "Competition analysis must be at least 10 characters"),
}


def check_min_length(field_name: str, value: Optional[str]) -> str:
    """Validate one content field against its minimum length."""
    minimum, message = MIN_LENGTHS[field_name]
    if value is None:
        raise ValueError(message)
    if field_name == "title" and not value.strip():
        raise ValueError(message)
    if len(value) < minimum:
        raise ValueError(message)
    return value


class IdeaCreate(CamelModel):
    """Structured startup idea submitted by the user."""

    title: str
    problem: str
    solution: str
    target_market: str
    business_model: str
    competition: str
    team: str
    is_bookmarked: bool = False

    @field_validator(*MIN_LENGTHS.keys())
    @classmethod
    def content_long_enough(cls, v: str, info) -> str:
        return check_min_length(info.field_name, v)


class IdeaUpdate(CamelModel):
    """Partial update. Only the keys present in the request are applied."""

    title: Optional[str] = None
    problem: Optional[str] = None
    solution: Optional[str] = None
    target_market: Optional[str] = None
    business_model: Optional[str] = None
    competition: Optional[str] = None
    team: Optional[str] = None
    status: Optional[IdeaStatus] = None
    is_bookmarked: Optional[bool] = None

    @field_validator(*MIN_LENGTHS.keys())
    @classmethod
    def content_long_enough(cls, v: Optional[str], info) -> str:
        # Defaults are not validated, so this only sees values the client sent.
        return check_min_length(info.field_name, v)

    @field_validator("status", "is_bookmarked")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class IdeaRecord(CamelModel):
    id: UUID
    user_id: UUID
    title: str
    problem: str
    solution: str
    target_market: str
    business_model: str
    competition: str
    team: str
    viability_score: Optional[int] = None
    feedback: Optional[str] = None
    status: IdeaStatus = "draft"
    is_bookmarked: bool = False
    created_at: datetime
    updated_at: datetime


class FeedbackDetails(CamelModel):
    category: str
    strengths: list[str] = []
    improvements: list[str] = []
    next_steps: list[str] = []


class IdeaResponse(IdeaRecord):
    """Idea as returned by the API: the stored record plus parsed feedback."""

    @computed_field(alias="feedbackDetails")
    @property
    def feedback_details(self) -> Optional[FeedbackDetails]:
        if not self.feedback:
            return None
        parsed = parse_feedback(self.feedback)
        return FeedbackDetails(
            category=parsed.category,
            strengths=parsed.strengths,
            improvements=parsed.improvements,
            next_steps=parsed.next_steps,
        )
