"""HTTP middleware: request log, static files, session resolution.

Registration order in create_app makes the stack (outer to inner):
log_requests -> serve_static -> resolve_session -> router.
"""
import logging
import time
from pathlib import Path

from fastapi import Request
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from profilehub.core.context import ANONYMOUS, AuthContext
from profilehub.core.errors import StoreError
from profilehub.core.security import unsign_session_id
from profilehub.core.views import set_session_cookie, sets_session_cookie

logger = logging.getLogger("profilehub.access")


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - started) * 1000
    logger.info("%s %s %d %.1f ms", request.method, request.url.path, response.status_code, elapsed)
    return response


def find_static_file(public_dir: Path, url_path: str) -> Path | None:
    """Map a URL path 1:1 onto public_dir. Anything escaping the directory is ignored."""
    relative = url_path.lstrip("/")
    if not relative:
        return None
    try:
        root = public_dir.resolve()
        candidate = (root / relative).resolve()
        if root not in candidate.parents:
            return None
        return candidate if candidate.is_file() else None
    except (OSError, ValueError):
        # names the filesystem rejects (too long, NUL bytes) are simply not files
        return None


async def serve_static(request: Request, call_next):
    if request.method in ("GET", "HEAD"):
        path = find_static_file(request.app.state.ctx.settings.public_dir, request.url.path)
        if path is not None:
            return FileResponse(path)
    return await call_next(request)


async def resolve_session(request: Request, call_next):
    ctx = request.app.state.ctx
    settings = ctx.settings

    record = None
    sid = unsign_session_id(request.cookies.get(settings.session_cookie_name), settings.session_secret)
    if sid:
        try:
            record = await run_in_threadpool(ctx.sessions.get, sid)
        except StoreError:
            logger.exception("Session lookup failed; serving request anonymously")

    if record is None:
        request.state.auth = ANONYMOUS
    else:
        request.state.auth = AuthContext(session_id=record.sid, user=record.user)

    response = await call_next(request)

    # sliding expiry, unless the handler already issued or cleared the cookie
    if record is not None and not sets_session_cookie(response, settings.session_cookie_name):
        try:
            await run_in_threadpool(ctx.sessions.touch, record.sid)
        except StoreError:
            logger.exception("Session touch failed")
        else:
            set_session_cookie(request, response, record.sid)
    return response
