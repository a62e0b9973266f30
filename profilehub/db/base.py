"""SQLAlchemy declarative bases and model imports for Alembic / create_all."""
from profilehub.db.session import Base, SessionStoreBase

# Import all models so the metadata knows about them
from profilehub.models.friend import Friend  # noqa: F401
from profilehub.models.session import SessionRow  # noqa: F401
from profilehub.models.user import User  # noqa: F401

__all__ = ["Base", "SessionStoreBase", "User", "Friend", "SessionRow"]
