from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Credentials, User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT email, full_name FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return User.from_row(row) if row else None

    def get_credentials(self, email: str) -> Optional[Credentials]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT email, password_hash, is_active FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            if not row:
                return None
            return Credentials(
                email=row["email"],
                password_hash=row["password_hash"],
                is_active=bool(row.get("is_active", True)),
            )

    def create_user(self, *, email: str, full_name: str, password_hash: str) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users(email, full_name, password_hash, is_active) VALUES(%s,%s,%s,1)",
                (email, full_name, password_hash),
            )
        return User(email=email, full_name=full_name)

    def set_password(self, *, email: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s, is_active=1 WHERE email=%s", (password_hash, email))
            return cur.rowcount > 0
