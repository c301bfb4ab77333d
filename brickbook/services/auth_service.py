from __future__ import annotations

import logging
import re
from typing import Optional

from brickbook.db.models import Session, User
from brickbook.db.sqlite_store import SqliteStore
from brickbook.services.common import BaseService
from brickbook.utils.validators import ValidationError, require_text

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def require_email(value: str | None) -> str:
    email = require_text(value, "email").lower()
    if not EMAIL_RE.match(email):
        raise ValidationError(f"Invalid email address: {email}")
    return email


class AuthService(BaseService):
    """Sign-in flows on top of the store's session API."""

    def current_user(self) -> Optional[User]:
        session = self.store.current_session()
        return session.user if session else None

    def sign_in(self, email: str, password: str) -> Session:
        address = require_email(email)
        secret = require_text(password, "password")
        return self.store.sign_in_with_password(address, secret)

    def send_login_link(self, email: str, redirect_to: str | None = None) -> None:
        self.store.sign_in_with_link(require_email(email), redirect_to=redirect_to)

    def verify_login_link(self, email: str, code: str) -> Session:
        return self.store.verify_link(require_email(email), require_text(code, "code"))

    def sign_out(self) -> None:
        self.store.sign_out()
        logger.info("Signed out")

    # First start of a local installation
    def needs_setup(self) -> bool:
        return isinstance(self.store, SqliteStore) and not self.store.has_users()

    def create_first_user(self, email: str, password: str) -> Session:
        """Create the owner account of a fresh local database and sign in."""
        if not self.needs_setup():
            self._raise("An account already exists")
        address = require_email(email)
        secret = require_text(password, "password")
        if len(secret) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        self.store.register_user(address, secret)
        logger.info("Local account created for %s", address)
        return self.store.sign_in_with_password(address, secret)
