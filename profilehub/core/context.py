"""Application context built once at startup and attached to app.state."""
import logging
from dataclasses import dataclass

from fastapi.templating import Jinja2Templates
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from profilehub.core.config import Settings
from profilehub.core.security import PasswordHasher
from profilehub.db.base import Base
from profilehub.db.session import make_engine, make_session_factory
from profilehub.schemas.user import SessionUser
from profilehub.services.sessions import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    sessions: SessionStore
    hasher: PasswordHasher
    templates: Jinja2Templates

    def init_storage(self) -> None:
        self.settings.data_dir.mkdir(parents=True, exist_ok=True)
        Base.metadata.create_all(bind=self.engine)
        self.sessions.init()

    def close(self) -> None:
        self.engine.dispose()
        self.sessions.close()


@dataclass(frozen=True)
class AuthContext:
    """Identity resolved once per request from the session cookie."""

    session_id: str | None = None
    user: SessionUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


ANONYMOUS = AuthContext()


def build_context(settings: Settings) -> AppContext:
    if settings.uses_default_secret:
        logger.warning(
            "SESSION_SECRET is not set; falling back to the insecure development default. "
            "Set SESSION_SECRET before exposing this server."
        )
    engine = make_engine(settings.main_database_url, echo=settings.debug)
    sessions = SessionStore(make_engine(settings.sessions_database_url), max_age=settings.session_max_age)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=make_session_factory(engine),
        sessions=sessions,
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        templates=Jinja2Templates(directory=str(settings.templates_dir)),
    )
