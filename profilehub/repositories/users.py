"""Data access for users and friend edges.

Reads return ORM objects (or None) and raise StoreError on unexpected
failures. Mutations never raise for expected outcomes: they return a Result
whose error is one of the ErrorKind values.
"""
import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from profilehub.core.errors import ErrorKind, Result, StoreError
from profilehub.models.friend import Friend
from profilehub.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    # ---------- reads ----------

    def find_by_login(self, login: str) -> User | None:
        """Exact, case-sensitive match."""
        if not login:
            return None
        try:
            result = self.db.execute(select(User).where(User.login == login))
            return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("user lookup by login failed") from exc

    def find_by_id(self, user_id: int) -> User | None:
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as exc:
            raise StoreError("user lookup by id failed") from exc

    def list_friends(self, owner_id: int) -> list[User]:
        """Users that owner_id has added, ordered by login."""
        try:
            result = self.db.execute(
                select(User)
                .join(Friend, Friend.friend_id == User.id)
                .where(Friend.user_id == owner_id)
                .order_by(User.login.asc())
            )
            return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StoreError("friend list query failed") from exc

    # ---------- mutations ----------

    def create(self, login: str, password_hash: str, display_name: str) -> Result[User]:
        user = User(login=login, password_hash=password_hash, display_name=display_name, bio="")
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Login %r already exists", login)
            return Result.failure(ErrorKind.CONSTRAINT)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create user %r", login)
            return Result.failure(ErrorKind.STORAGE)
        self.db.refresh(user)
        return Result.success(user)

    def update(self, user_id: int, display_name: str, bio: str, password_hash: str) -> Result[User]:
        try:
            user = self.db.get(User, user_id)
            if user is None:
                return Result.failure(ErrorKind.NOT_FOUND)
            user.display_name = display_name
            user.bio = bio
            user.password_hash = password_hash
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update user id=%s", user_id)
            return Result.failure(ErrorKind.STORAGE)
        return Result.success(user)

    def add_friend(self, owner_id: int, target_id: int) -> Result[None]:
        """Insert the edge unless it already exists."""
        try:
            if self.db.get(Friend, (owner_id, target_id)) is not None:
                return Result.success()
            self.db.add(Friend(user_id=owner_id, friend_id=target_id))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # a concurrent add of the same edge is still a success
            if self.db.get(Friend, (owner_id, target_id)) is not None:
                return Result.success()
            logger.info("Friend edge %s -> %s rejected by constraints", owner_id, target_id)
            return Result.failure(ErrorKind.CONSTRAINT)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to add friend edge %s -> %s", owner_id, target_id)
            return Result.failure(ErrorKind.STORAGE)
        return Result.success()

    def remove_friend(self, owner_id: int, target_id: int) -> Result[None]:
        try:
            self.db.execute(
                delete(Friend).where(Friend.user_id == owner_id, Friend.friend_id == target_id)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to remove friend edge %s -> %s", owner_id, target_id)
            return Result.failure(ErrorKind.STORAGE)
        return Result.success()
