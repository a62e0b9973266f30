"""Server-side session record. Lives in the session store database, not the main one."""
from sqlalchemy import Column, Integer, String, Text

from profilehub.db.session import SessionStoreBase


class SessionRow(SessionStoreBase):
    __tablename__ = "sessions"

    sid = Column(String(128), primary_key=True)
    sess = Column(Text, nullable=False)  # JSON snapshot of the user record
    expired = Column(Integer, nullable=False, index=True)  # epoch seconds
