"""Durable server-side session store with sliding expiry."""
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable

from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from profilehub.core.errors import StoreError
from profilehub.db.session import SessionStoreBase, make_session_factory
from profilehub.models.session import SessionRow
from profilehub.schemas.user import SessionUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    sid: str
    user: SessionUser
    expires_at: int


class SessionStore:
    def __init__(self, engine: Engine, max_age: int, clock: Callable[[], float] = time.time):
        self.engine = engine
        self.max_age = max_age
        self._clock = clock
        self._session_factory = make_session_factory(engine)

    def _expiry(self) -> int:
        return int(self._clock()) + self.max_age

    def init(self) -> None:
        """Create the sessions table and drop records that expired while down."""
        SessionStoreBase.metadata.create_all(bind=self.engine)
        purged = self.purge_expired()
        if purged:
            logger.info("Purged %d expired sessions", purged)

    def create(self, user: SessionUser) -> str:
        sid = secrets.token_urlsafe(32)
        try:
            with self._session_factory() as db:
                db.add(SessionRow(sid=sid, sess=user.model_dump_json(), expired=self._expiry()))
                db.commit()
        except SQLAlchemyError as exc:
            raise StoreError("session create failed") from exc
        return sid

    def get(self, sid: str) -> SessionRecord | None:
        """Return the live record for sid, or None if absent or expired."""
        try:
            with self._session_factory() as db:
                row = db.get(SessionRow, sid)
                if row is None:
                    return None
                if row.expired <= int(self._clock()):
                    db.delete(row)
                    db.commit()
                    return None
                user = SessionUser.model_validate_json(row.sess)
                return SessionRecord(sid=row.sid, user=user, expires_at=row.expired)
        except ValidationError:
            logger.warning("Discarding unreadable session record")
            try:
                self.destroy(sid)
            except StoreError:
                logger.exception("Could not delete unreadable session record; it will be retried on next use")
            return None
        except SQLAlchemyError as exc:
            raise StoreError("session lookup failed") from exc

    def touch(self, sid: str) -> None:
        """Push expiry out to now + max_age."""
        try:
            with self._session_factory() as db:
                row = db.get(SessionRow, sid)
                if row is not None:
                    row.expired = self._expiry()
                    db.commit()
        except SQLAlchemyError as exc:
            raise StoreError("session touch failed") from exc

    def update(self, sid: str, user: SessionUser) -> None:
        """Replace the user snapshot in place."""
        try:
            with self._session_factory() as db:
                row = db.get(SessionRow, sid)
                if row is None:
                    return
                row.sess = user.model_dump_json()
                row.expired = self._expiry()
                db.commit()
        except SQLAlchemyError as exc:
            raise StoreError("session update failed") from exc

    def destroy(self, sid: str) -> None:
        try:
            with self._session_factory() as db:
                db.execute(delete(SessionRow).where(SessionRow.sid == sid))
                db.commit()
        except SQLAlchemyError as exc:
            raise StoreError("session destroy failed") from exc

    def purge_expired(self) -> int:
        try:
            with self._session_factory() as db:
                result = db.execute(delete(SessionRow).where(SessionRow.expired <= int(self._clock())))
                db.commit()
                return result.rowcount or 0
        except SQLAlchemyError as exc:
            raise StoreError("session purge failed") from exc

    def close(self) -> None:
        self.engine.dispose()
