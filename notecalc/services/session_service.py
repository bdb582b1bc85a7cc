"""Session helpers (issue tokens, cookies, validation)."""
from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import Request, Response

from notecalc.core.config import Settings

SESSION_COOKIE_NAME = "session"


@dataclass(frozen=True)
class SessionRecord:
    email: str
    expires_at: datetime


class SessionStore:
    """In-memory session tokens, one store per application instance."""

    def __init__(self, ttl_seconds: int) -> None:
        self.ttl_seconds = max(60, ttl_seconds)
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def issue(self, email: str) -> str:
        token = secrets.token_urlsafe(32)
        now = self._now()
        expires_at = now + timedelta(seconds=self.ttl_seconds)
        with self._lock:
            self._prune(now)
            self._sessions[token] = SessionRecord(email=email, expires_at=expires_at)
        return token

    def _prune(self, now: datetime) -> None:
        expired = [token for token, record in self._sessions.items() if record.expires_at < now]
        for token in expired:
            del self._sessions[token]

    def lookup(self, token: Optional[str]) -> Optional[str]:
        """Return the e-mail bound to ``token``; expired tokens are dropped."""
        if not token:
            return None
        with self._lock:
            record = self._sessions.get(token)
            if record is None:
                return None
            if record.expires_at < self._now():
                del self._sessions[token]
                return None
            return record.email

    def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)


def _store(request: Request) -> SessionStore:
    store = getattr(getattr(request.app, "state", None), "session_store", None)
    if store is None:
        raise RuntimeError("SessionStore not configured")
    return store


def current_user_email(request: Request) -> str | None:
    """Return the e-mail associated with the current session cookie, if any."""
    return _store(request).lookup(request.cookies.get(SESSION_COOKIE_NAME))


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="strict",
        max_age=settings.session_ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
