"""FastAPI dependencies: context, DB session, auth."""
from typing import Annotated, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from profilehub.core.context import ANONYMOUS, AppContext, AuthContext
from profilehub.core.errors import LoginRequired
from profilehub.repositories.users import UserRepository
from profilehub.schemas.user import SessionUser


def get_ctx(request: Request) -> AppContext:
    return request.app.state.ctx


def get_db(ctx: Annotated[AppContext, Depends(get_ctx)]) -> Generator[Session, None, None]:
    db = ctx.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_users(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    return UserRepository(db)


def get_auth(request: Request) -> AuthContext:
    return getattr(request.state, "auth", ANONYMOUS)


def require_user(auth: Annotated[AuthContext, Depends(get_auth)]) -> SessionUser:
    """Auth gate for protected routes."""
    if auth.user is None:
        raise LoginRequired()
    return auth.user
