"""
Authentication use cases: a single configured credential and login/logout
on top of the session store.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from notecalc.core.security import hash_password, is_password_hash, verify_password
from notecalc.services.session_service import SessionStore

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class InvalidCredentialsError(AuthError):
    pass


class CredentialStore:
    """Holds the one known e-mail/password pair, password kept as an argon2 hash."""

    def __init__(self, email: str, password: str) -> None:
        self.email = (email or "").strip()
        if not self.email or not password:
            self.password_hash = ""
        elif is_password_hash(password):
            self.password_hash = password
        else:
            self.password_hash = hash_password(password)

    @property
    def enabled(self) -> bool:
        return bool(self.email and self.password_hash)

    def is_valid_user(self, email: str, password: str) -> bool:
        if not self.enabled or not email or not password:
            return False
        if not secrets.compare_digest(self.email.lower().encode(), email.strip().lower().encode()):
            return False
        return verify_password(password, self.password_hash)


@dataclass
class LoginSuccess:
    email: str
    session_token: str


@dataclass
class AuthService:
    """Checks credentials and issues/revokes session tokens."""

    credentials: CredentialStore
    sessions: SessionStore

    def login(self, email: str, password: str) -> LoginSuccess:
        if not self.credentials.is_valid_user(email, password):
            logger.warning("Rejected login for %r", email)
            raise InvalidCredentialsError("Invalid email or password.")
        token = self.sessions.issue(self.credentials.email)
        logger.info("User %s logged in", self.credentials.email)
        return LoginSuccess(email=self.credentials.email, session_token=token)

    def logout(self, token: str | None) -> None:
        email = self.sessions.lookup(token)
        self.sessions.revoke(token)
        if email:
            logger.info("User %s logged out", email)
