"""User model: login credentials and public profile fields."""
from sqlalchemy import Column, Integer, String, Text

from profilehub.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=False, default="", server_default="")

    def __repr__(self):
        return f"<User id={self.id} login={self.login!r}>"
