"""profilehub - FastAPI app factory and entry point."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from profilehub.core.config import Settings, get_settings
from profilehub.core.context import build_context
from profilehub.core.errors import LoginRequired, StoreError
from profilehub.core.logging_config import setup_logging
from profilehub.core.middleware import log_requests, resolve_session, serve_static
from profilehub.core.views import profile_url, redirect, render
from profilehub.routers import auth, web

logger = logging.getLogger(__name__)


async def login_required_handler(request: Request, exc: LoginRequired):
    return redirect("/login")


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    # unmatched method on a known path is treated like an unmatched path
    if exc.status_code in (404, 405):
        return render(request, "404.html", status_code=404)
    return await http_exception_handler(request, exc)


async def store_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return render(request, "error.html", {"message": "Something went wrong"}, status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    ctx = build_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx.init_storage()
        logger.info("Storage ready (%s)", settings.main_database_url)
        yield
        ctx.close()

    app = FastAPI(
        title=settings.app_name,
        description="Profiles and friends",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.ctx = ctx
    ctx.templates.env.filters["profile_url"] = profile_url

    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    app.include_router(web.router)
    app.include_router(auth.router)

    # last added runs first
    app.middleware("http")(resolve_session)
    app.middleware("http")(serve_static)
    app.middleware("http")(log_requests)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run("profilehub.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
