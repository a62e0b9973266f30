"""Pydantic schemas for users: the public projection and the session snapshot."""
from pydantic import BaseModel


class UserPublic(BaseModel):
    """The only user shape handed to templates. No credential fields."""

    id: int
    login: str
    display_name: str
    bio: str = ""

    class Config:
        from_attributes = True


class SessionUser(UserPublic):
    """Full user record as stored in a session."""

    password_hash: str

    def public(self) -> UserPublic:
        return UserPublic(id=self.id, login=self.login, display_name=self.display_name, bio=self.bio)
