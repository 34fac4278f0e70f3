from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StoreError, ValidationError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` on a fresh connection, committing on success.

    Driver errors are re-raised as ``StoreError`` so services only ever see the
    generic store fault. Constraint violations (duplicate keys, missing parent
    rows) become ``ValidationError``.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("Cannot reach the database: %s", exc)
        raise StoreError("Database is unreachable") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as exc:
        conn.rollback()
        logger.warning("Database rejected a write: %s", exc)
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise ValidationError("A record with the same key already exists") from exc
        raise ValidationError("The request conflicts with stored data") from exc
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.error("Database request failed: %s", exc)
        raise StoreError("Database request failed") from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
