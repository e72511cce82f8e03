# Schemas package
from .auth_schema import LoginRequest, MessageResponse, RegisterRequest, UserPublic, UserRecord
from .idea_schema import FeedbackDetails, IdeaCreate, IdeaRecord, IdeaResponse, IdeaUpdate

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "UserPublic",
    "UserRecord",
    "MessageResponse",
    "IdeaCreate",
    "IdeaUpdate",
    "IdeaRecord",
    "IdeaResponse",
    "FeedbackDetails",
]
