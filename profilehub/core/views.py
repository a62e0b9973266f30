"""View rendering and session cookie helpers shared by the routers."""
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from profilehub.core.context import ANONYMOUS
from profilehub.core.security import sign_session_id


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200) -> HTMLResponse:
    """Render a template with the current user (public fields only) in scope."""
    ctx = request.app.state.ctx
    auth = getattr(request.state, "auth", ANONYMOUS)
    data = {"current_user": auth.user.public() if auth.user else None}
    if context:
        data.update(context)
    return ctx.templates.TemplateResponse(request, name, data, status_code=status_code)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=302)


def profile_url(login: str) -> str:
    """Own-profile URL; the login is quoted as a single path segment."""
    return f"/u/{quote(login, safe='')}"


def set_session_cookie(request: Request, response: Response, session_id: str) -> None:
    settings = request.app.state.ctx.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_id(session_id, settings.session_secret),
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(request: Request, response: Response) -> None:
    settings = request.app.state.ctx.settings
    # path must match the one used in set_cookie()
    response.delete_cookie(settings.session_cookie_name, path="/", httponly=True, samesite="lax")


def sets_session_cookie(response: Response, cookie_name: str) -> bool:
    prefix = f"{cookie_name}="
    return any(value.startswith(prefix) for value in response.headers.getlist("set-cookie"))
