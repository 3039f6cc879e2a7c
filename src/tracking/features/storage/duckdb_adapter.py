from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from urllib.parse import quote

import duckdb

from .schema import COOKIES_TABLE_NAME, create_schema

MEMORY_PATH = ":memory:"

# Only the characters a cookie name/value cannot carry are escaped.
_COOKIE_UNSAFE = re.compile(r'[,;"\\=\s%]')


def escape_cookie_part(value: str) -> str:
    return _COOKIE_UNSAFE.sub(lambda m: quote(m.group(0), safe=""), str(value))


@dataclass(frozen=True)
class StoredCookie:
    name: str
    value: str
    expires_utc: datetime
    path: str


class CookieJar:
    """
    Durable name -> value slots with an expiry horizon, backed by DuckDB.
    Expired rows are invisible to get() and purged when seen.
    """

    def __init__(self, path: str = MEMORY_PATH, *, clean_slate: bool = False) -> None:
        self.path = path
        self.clean_slate = clean_slate
        self._conn: duckdb.DuckDBPyConnection | None = None

    def open(self) -> None:
        if self._conn is not None:
            return

        if self.path != MEMORY_PATH:
            if self.clean_slate and os.path.exists(self.path):
                os.remove(self.path)

            # Ensure parent dir exists
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        self._conn = duckdb.connect(self.path)
        create_schema(self._conn)

    @property
    def conn(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise RuntimeError("CookieJar not opened. Call open() first.")
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get(self, name: str, *, now: datetime | None = None) -> str | None:
        cookie = self.get_cookie(name, now=now)
        return cookie.value if cookie is not None else None

    def get_cookie(self, name: str, *, now: datetime | None = None) -> StoredCookie | None:
        now = _ensure_utc(now)
        row = self.conn.execute(
            f"SELECT name, value, expires_utc, path FROM {COOKIES_TABLE_NAME} WHERE name = ?",
            [name],
        ).fetchone()
        if row is None:
            return None

        expires_utc = _ensure_utc(row[2])
        if expires_utc <= now:
            self.conn.execute(f"DELETE FROM {COOKIES_TABLE_NAME} WHERE name = ?", [name])
            return None
        return StoredCookie(name=row[0], value=row[1], expires_utc=expires_utc, path=row[3])

    def set(
        self,
        name: str,
        value: str,
        *,
        expires_days: float,
        path: str = "/",
        now: datetime | None = None,
    ) -> None:
        """
        Full overwrite of the slot. Expiry is relative to `now`; a negative
        horizon expires the cookie immediately.
        """
        expires_utc = _ensure_utc(now) + timedelta(days=float(expires_days))
        self.conn.execute(
            f"""
            INSERT OR REPLACE INTO {COOKIES_TABLE_NAME} (name, value, expires_utc, path)
            VALUES (?, ?, ?, ?)
            """,
            [name, value, expires_utc.replace(tzinfo=None), path],
        )

    def remove(self, name: str) -> None:
        self.conn.execute(f"DELETE FROM {COOKIES_TABLE_NAME} WHERE name = ?", [name])

    def enabled(self) -> bool:
        """
        Probe: write, read back and remove a throwaway slot.
        """
        try:
            self.set("_", "_", expires_days=1)
            ok = self.get("_") == "_"
            self.remove("_")
        except (duckdb.Error, RuntimeError):
            return False
        return ok

    def count(self) -> int:
        """
        Convenience method for sanity checks/tests.
        """
        res = self.conn.execute(f"SELECT COUNT(*) FROM {COOKIES_TABLE_NAME}").fetchone()
        return int(res[0]) if res else 0


def _ensure_utc(dt: datetime | None) -> datetime:
    if dt is None:
        return datetime.now(UTC)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
