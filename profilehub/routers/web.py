"""Web routes: landing page, profiles, friends, settings. Jinja2 templates."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from profilehub.core.context import AppContext, AuthContext
from profilehub.core.deps import get_auth, get_ctx, get_users, require_user
from profilehub.core.errors import StoreError
from profilehub.core.views import profile_url, redirect, render
from profilehub.repositories.users import UserRepository
from profilehub.schemas.user import SessionUser, UserPublic

logger = logging.getLogger(__name__)
router = APIRouter(tags=["web"])

ERR_USER_NOT_FOUND = "User not found"
ERR_FRIENDS_FAILED = "Could not update friends"
ERR_SAVE_FAILED = "Failed to save"


# ---------- helpers ----------

def _public_list(users) -> list[UserPublic]:
    return [UserPublic.model_validate(u) for u in users]


def _friends_page(request: Request, users: UserRepository, owner_id: int, error: str | None = None, status_code: int = 200):
    friends = _public_list(users.list_friends(owner_id))
    return render(request, "friends.html", {"friends": friends, "error": error}, status_code=status_code)


# ---------- routes ----------

@router.get("/", response_class=HTMLResponse)
def home(request: Request, auth: Annotated[AuthContext, Depends(get_auth)]):
    if auth.user:
        return redirect(profile_url(auth.user.login))
    return render(request, "home.html")


@router.get("/mypage")
def mypage(user: Annotated[SessionUser, Depends(require_user)]):
    return redirect(profile_url(user.login))


@router.get("/u/{login:path}", response_class=HTMLResponse)
def profile(
    request: Request,
    login: str,
    auth: Annotated[AuthContext, Depends(get_auth)],
    users: Annotated[UserRepository, Depends(get_users)],
):
    profile_user = users.find_by_login(login)
    if profile_user is None:
        return render(request, "404.html", status_code=404)

    is_own = auth.user is not None and auth.user.id == profile_user.id
    return render(
        request,
        "profile.html",
        {
            "profile": UserPublic.model_validate(profile_user),
            "friends": _public_list(users.list_friends(profile_user.id)),
            "is_own": is_own,
        },
    )


@router.get("/friends", response_class=HTMLResponse)
def friends_get(
    request: Request,
    user: Annotated[SessionUser, Depends(require_user)],
    users: Annotated[UserRepository, Depends(get_users)],
):
    return _friends_page(request, users, user.id)


@router.post("/friends/add")
def friends_add(
    request: Request,
    user: Annotated[SessionUser, Depends(require_user)],
    users: Annotated[UserRepository, Depends(get_users)],
    login: Annotated[str, Form()] = "",
):
    target = users.find_by_login(login)
    if target is None:
        return _friends_page(request, users, user.id, error=ERR_USER_NOT_FOUND, status_code=404)
    if target.id == user.id:
        return redirect("/friends")

    result = users.add_friend(user.id, target.id)
    if not result.ok:
        return _friends_page(request, users, user.id, error=ERR_FRIENDS_FAILED, status_code=500)
    logger.debug("User %s added friend %s", user.id, target.id)
    return redirect("/friends")


@router.post("/friends/remove")
def friends_remove(
    request: Request,
    user: Annotated[SessionUser, Depends(require_user)],
    users: Annotated[UserRepository, Depends(get_users)],
    user_id: Annotated[str, Form()] = "",
):
    try:
        target_id = int(user_id.strip())
    except ValueError:
        return redirect("/friends")

    result = users.remove_friend(user.id, target_id)
    if not result.ok:
        return _friends_page(request, users, user.id, error=ERR_FRIENDS_FAILED, status_code=500)
    logger.debug("User %s removed friend %s", user.id, target_id)
    return redirect("/friends")


@router.get("/settings", response_class=HTMLResponse)
def settings_get(request: Request, user: Annotated[SessionUser, Depends(require_user)]):
    return render(request, "settings.html", {"user": user.public()})


@router.post("/settings")
def settings_post(
    request: Request,
    ctx: Annotated[AppContext, Depends(get_ctx)],
    auth: Annotated[AuthContext, Depends(get_auth)],
    user: Annotated[SessionUser, Depends(require_user)],
    users: Annotated[UserRepository, Depends(get_users)],
    display_name: Annotated[str, Form()] = "",
    bio: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Update profile. Empty display_name keeps the old one; empty bio clears it."""

    def failed():
        return render(request, "settings.html", {"user": user.public(), "error": ERR_SAVE_FAILED}, status_code=500)

    password_hash = user.password_hash
    try:
        if password.strip():
            password_hash = ctx.hasher.hash(password)
    except ValueError:
        logger.exception("Password hashing failed for user id=%s", user.id)
        return failed()

    result = users.update(user.id, display_name or user.display_name, bio or "", password_hash)
    if not result.ok:
        logger.warning("Settings update for user id=%s failed: %s", user.id, result.error.value)
        return failed()

    try:
        ctx.sessions.update(auth.session_id, SessionUser.model_validate(result.value))
    except StoreError:
        logger.exception("Saved settings but could not refresh session for user id=%s", user.id)
        return failed()

    logger.info("Updated settings for user id=%s", user.id)
    return redirect("/settings")
