from .auth_session import AuthSession
from .idea import Idea
from .user import User

__all__ = ["AuthSession", "Idea", "User"]
