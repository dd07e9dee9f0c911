from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection

_DUP_KEY_RE = re.compile(r"for key '(?:[\w]+\.)?([\w]+)'")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
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


def duplicate_key_name(err: Exception) -> Optional[str]:
    """Return the violated unique key name for a MySQL duplicate-entry error, else None.

    MySQL reports ``Duplicate entry 'x' for key 'table.key_name'`` (8.0) or
    ``... for key 'key_name'`` (5.7).
    """
    if not isinstance(err, IntegrityError) or getattr(err, "errno", None) != errorcode.ER_DUP_ENTRY:
        return None
    match = _DUP_KEY_RE.search(str(getattr(err, "msg", "") or err))
    return match.group(1) if match else ""


def like_pattern(term: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards escaped."""
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
