from profilehub.schemas.user import SessionUser, UserPublic

__all__ = ["SessionUser", "UserPublic"]
