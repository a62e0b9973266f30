"""Auth routes: register, login, logout. Server-side sessions via signed cookie."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from profilehub.core.context import AppContext, AuthContext
from profilehub.core.deps import get_auth, get_ctx, get_users
from profilehub.core.errors import ErrorKind, StoreError
from profilehub.core.views import clear_session_cookie, profile_url, redirect, render, set_session_cookie
from profilehub.models.user import User
from profilehub.repositories.users import UserRepository
from profilehub.schemas.user import SessionUser

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])

ERR_MISSING_FIELDS = "Please fill out all fields"
ERR_LOGIN_TAKEN = "Login is already taken"
ERR_REGISTRATION_FAILED = "Registration failed"
ERR_INVALID_CREDENTIALS = "Invalid login or password"


def _start_session(request: Request, ctx: AppContext, auth: AuthContext, user: User) -> RedirectResponse:
    """Replace any existing session with a fresh one for user and go to their profile."""
    if auth.session_id:
        ctx.sessions.destroy(auth.session_id)
    sid = ctx.sessions.create(SessionUser.model_validate(user))
    response = redirect(profile_url(user.login))
    set_session_cookie(request, response, sid)
    return response


@router.get("/register", response_class=HTMLResponse)
def register_get(request: Request, auth: Annotated[AuthContext, Depends(get_auth)]):
    """Show register form."""
    if auth.user:
        return redirect(profile_url(auth.user.login))
    return render(request, "register.html")


@router.post("/register")
def register_post(
    request: Request,
    ctx: Annotated[AppContext, Depends(get_ctx)],
    auth: Annotated[AuthContext, Depends(get_auth)],
    users: Annotated[UserRepository, Depends(get_users)],
    login: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    display_name: Annotated[str, Form()] = "",
):
    """Create user, start a session, redirect to the new profile."""
    form = {"login": login, "display_name": display_name}

    def form_error(message: str, status_code: int):
        return render(request, "register.html", {"error": message, "form": form}, status_code=status_code)

    if not login or not password or not display_name:
        return form_error(ERR_MISSING_FIELDS, 400)

    try:
        if users.find_by_login(login) is not None:
            return form_error(ERR_LOGIN_TAKEN, 400)

        try:
            password_hash = ctx.hasher.hash(password)
        except ValueError:
            logger.exception("Password hashing failed for new login %r", login)
            return form_error(ERR_REGISTRATION_FAILED, 500)

        result = users.create(login, password_hash, display_name)
        if result.error is ErrorKind.CONSTRAINT:
            # lost a race with another registration of the same login
            return form_error(ERR_LOGIN_TAKEN, 400)
        if not result.ok:
            return form_error(ERR_REGISTRATION_FAILED, 500)

        logger.info("Registered user %r (id=%s)", login, result.value.id)
        return _start_session(request, ctx, auth, result.value)
    except StoreError:
        logger.exception("Registration failed for login %r", login)
        return form_error(ERR_REGISTRATION_FAILED, 500)


@router.get("/login", response_class=HTMLResponse)
def login_get(request: Request, auth: Annotated[AuthContext, Depends(get_auth)]):
    """Show login form."""
    if auth.user:
        return redirect(profile_url(auth.user.login))
    return render(request, "login.html")


@router.post("/login")
def login_post(
    request: Request,
    ctx: Annotated[AppContext, Depends(get_ctx)],
    auth: Annotated[AuthContext, Depends(get_auth)],
    users: Annotated[UserRepository, Depends(get_users)],
    login: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Authenticate and start a session; same error for unknown login and bad password."""
    user = users.find_by_login(login)
    if user is None or not ctx.hasher.verify(password, user.password_hash):
        logger.info("Failed login attempt for %r", login)
        return render(
            request,
            "login.html",
            {"error": ERR_INVALID_CREDENTIALS, "form": {"login": login}},
            status_code=400,
        )
    return _start_session(request, ctx, auth, user)


@router.post("/logout")
def logout_post(
    request: Request,
    ctx: Annotated[AppContext, Depends(get_ctx)],
    auth: Annotated[AuthContext, Depends(get_auth)],
):
    """Destroy the session and clear the cookie."""
    if auth.session_id:
        ctx.sessions.destroy(auth.session_id)
    response = redirect("/")
    clear_session_cookie(request, response)
    return response
