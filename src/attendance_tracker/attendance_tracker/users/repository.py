from __future__ import annotations

from typing import Optional, Protocol

from .model import Credentials, User


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_credentials(self, email: str) -> Optional[Credentials]:
        raise NotImplementedError

    def create_user(self, *, email: str, full_name: str, password_hash: str) -> User:
        raise NotImplementedError

    def set_password(self, *, email: str, password_hash: str) -> bool:
        raise NotImplementedError
