import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from notecalc.core.config import Settings, get_settings
from notecalc.core.logging_setup import setup_logging
from notecalc.core.rate_limiter import RateLimiter
from notecalc.core.templating import render
from notecalc.repositories.calculators_repository import CalculatorManager
from notecalc.repositories.json_storage import StorageError
from notecalc.repositories.notes_repository import NoteManager
from notecalc.routers import calculators as calculators_router
from notecalc.routers import home as home_router
from notecalc.routers import notes as notes_router
from notecalc.services.auth_service import AuthService, CredentialStore
from notecalc.services.session_service import SessionStore, current_user_email

logger = logging.getLogger(__name__)

BASE = os.path.dirname(__file__)
STATIC = os.path.join(BASE, "static")
TEMPLATES = os.path.join(BASE, "templates")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; img-src 'self' data:; style-src 'self'; script-src 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class AuthStateMiddleware(BaseHTTPMiddleware):
    """Expose the login state of the current request as request.state.is_authenticated."""

    async def dispatch(self, request, call_next):
        request.state.is_authenticated = current_user_email(request) is not None
        return await call_next(request)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn; every call gets its own stores."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title="notecalc")
    app.mount("/static", StaticFiles(directory=STATIC), name="static")

    sessions = SessionStore(settings.session_ttl_seconds)
    credentials = CredentialStore(settings.auth_email, settings.auth_password)
    if not credentials.enabled:
        logger.warning("AUTH_EMAIL/AUTH_PASSWORD not configured; login is disabled")

    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=TEMPLATES)
    app.state.note_manager = NoteManager(settings.data_dir, settings.notes_file)
    app.state.calculator_manager = CalculatorManager(settings.data_dir, settings.calculators_file)
    app.state.session_store = sessions
    app.state.auth_service = AuthService(credentials=credentials, sessions=sessions)
    app.state.rate_limiter = RateLimiter()

    app.add_middleware(AuthStateMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return render(
            request,
            "error.html",
            {"title": "Server error", "message": "The data store could not be written."},
            status_code=500,
        )

    app.include_router(home_router.router)
    app.include_router(notes_router.router)
    app.include_router(calculators_router.router)

    logger.info("notecalc ready. data_dir=%s", settings.data_dir)
    return app
