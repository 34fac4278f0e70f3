from __future__ import annotations

from urllib.parse import urlparse

from flask import session, url_for

from ..core.exceptions import AuthenticationError
from .model import User
from .repository import UserRepository


def is_safe_redirect(target: str | None) -> bool:
    """Only same-site relative paths are accepted as post-login targets."""

    if not target:
        return False
    parsed = urlparse(target)
    return not parsed.scheme and not parsed.netloc and target.startswith("/") and not target.startswith("//")


class SessionIdentityProvider:
    """Identity provider backed by the Flask session cookie.

    Needs an active request context.
    """

    SESSION_KEY = "user_email"

    def __init__(self, users: UserRepository, *, login_endpoint: str = "login"):
        self._users = users
        self._login_endpoint = login_endpoint

    def me(self) -> User:
        email = session.get(self.SESSION_KEY)
        if not email:
            raise AuthenticationError("Not logged in")

        user = self._users.get_by_email(email)
        if not user:
            session.clear()
            raise AuthenticationError("Account no longer exists")
        return user

    def login(self, user: User) -> None:
        session.clear()
        session[self.SESSION_KEY] = user.email
        session["name"] = user.full_name

    def login_with_redirect(self, return_url: str) -> str:
        if is_safe_redirect(return_url):
            return url_for(self._login_endpoint, next=return_url)
        return url_for(self._login_endpoint)

    def logout(self) -> None:
        session.clear()
