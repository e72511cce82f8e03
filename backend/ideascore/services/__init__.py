from .scoring_engine import format_feedback, parse_feedback, score_idea
from .auth_utils import hash_password, verify_password

__all__ = [
    "score_idea",
    "format_feedback",
    "parse_feedback",
    "hash_password",
    "verify_password",
]
