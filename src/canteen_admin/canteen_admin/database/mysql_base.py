from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StoreUnavailable, ValidationError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Errors that mean "try again later" rather than "your query is wrong".
_TRANSIENT_ERRNOS = {
    errorcode.ER_LOCK_WAIT_TIMEOUT,
    errorcode.ER_LOCK_DEADLOCK,
    errorcode.CR_SERVER_GONE_ERROR,
    errorcode.CR_SERVER_LOST,
    errorcode.CR_CONN_HOST_ERROR,
}


def is_duplicate_key(error: Exception) -> bool:
    return isinstance(error, mysql.connector.IntegrityError) and getattr(error, "errno", None) == errorcode.ER_DUP_ENTRY


@contextmanager
def duplicate_key_as(message: str):
    """Turn a UNIQUE violation raised inside the block into ValidationError(message)."""
    try:
        yield
    except mysql.connector.IntegrityError as e:
        if is_duplicate_key(e):
            raise ValidationError(message) from e
        raise


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) inside one transaction.

    Commits on success, rolls back on any exception. Driver-level
    connectivity and lock timeouts are re-raised as StoreUnavailable.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except (mysql.connector.OperationalError, mysql.connector.InterfaceError) as e:
        conn.rollback()
        logger.warning("Record store call failed: %s", e)
        raise StoreUnavailable("Record store is unavailable") from e
    except mysql.connector.DatabaseError as e:
        conn.rollback()
        if getattr(e, "errno", None) in _TRANSIENT_ERRNOS:
            logger.warning("Record store call timed out: %s", e)
            raise StoreUnavailable("Record store timed out") from e
        raise
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
