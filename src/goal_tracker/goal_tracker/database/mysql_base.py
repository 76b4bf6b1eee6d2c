from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import PersistenceError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back and re-raise on error.

    Driver errors surface as PersistenceError so services never see
    mysql.connector types.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise PersistenceError(f"Database unavailable: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise PersistenceError(str(e)) from e
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


def load_json_text(value: Any) -> Any:
    """Decode a TEXT/JSON column that may also hold a non-JSON legacy string.

    mysql-connector can return JSON/TEXT as:
    - str
    - bytes / bytearray
    - already-decoded list/dict (C extension with JSON columns)
    """

    if value is None:
        return None

    if isinstance(value, (list, dict)):
        return value

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")

    text = str(value)
    try:
        decoded = json.loads(text)
    except ValueError:
        # Rows written before key results were JSON hold a bare title.
        return text
    # A bare title such as 2024 or null also parses; keep it as written.
    if isinstance(decoded, (list, str)):
        return decoded
    return text


def dump_json_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)
