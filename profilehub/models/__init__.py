from profilehub.models.user import User
from profilehub.models.friend import Friend
from profilehub.models.session import SessionRow

__all__ = ["User", "Friend", "SessionRow"]
