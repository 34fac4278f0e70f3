from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.exceptions import AuthenticationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate a teacher (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        creds = self._users.get_credentials(email) if email else None
        if not creds or not creds.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(creds.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Rejected login for %s", email)
            raise AuthenticationError("Invalid email or password")

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid email or password")
        return user


class UserService:
    """Use case: manage teacher accounts (scripts and demo seeding)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_teacher(self, *, email: str, full_name: str, password: str) -> User:
        email = require_non_empty(email, "email").lower()
        if "@" not in email:
            raise ValidationError("email is not valid")
        full_name = require_non_empty(full_name, "full_name")
        require_min_length(password, "password", 6)

        if self._users.get_by_email(email):
            raise ValidationError("A teacher with this email already exists")

        user = self._users.create_user(email=email, full_name=full_name, password_hash=generate_password_hash(password))
        logger.info("Created teacher account %s", email)
        return user

    def ensure_teacher(self, *, email: str, full_name: str, password: str) -> User:
        """Create the account, or reset its password when it already exists."""

        existing = self._users.get_by_email(email.lower())
        if existing:
            self._users.set_password(email=existing.email, password_hash=generate_password_hash(password))
            return existing
        return self.create_teacher(email=email, full_name=full_name, password=password)
