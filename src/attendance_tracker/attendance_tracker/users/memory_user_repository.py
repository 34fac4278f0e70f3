from __future__ import annotations

import threading
from typing import Optional

from .model import Credentials, User
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self):
        self._users: dict[str, User] = {}
        self._credentials: dict[str, Credentials] = {}
        self._lock = threading.Lock()

    def get_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return self._users.get(email)

    def get_credentials(self, email: str) -> Optional[Credentials]:
        with self._lock:
            return self._credentials.get(email)

    def create_user(self, *, email: str, full_name: str, password_hash: str) -> User:
        user = User(email=email, full_name=full_name)
        with self._lock:
            self._users[email] = user
            self._credentials[email] = Credentials(email=email, password_hash=password_hash)
        return user

    def set_password(self, *, email: str, password_hash: str) -> bool:
        with self._lock:
            if email not in self._users:
                return False
            self._credentials[email] = Credentials(email=email, password_hash=password_hash)
            return True
