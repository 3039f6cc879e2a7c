from __future__ import annotations

COOKIES_TABLE_NAME = "cookies"

COOKIES_DDL = f"""
CREATE TABLE IF NOT EXISTS {COOKIES_TABLE_NAME} (
    name TEXT PRIMARY KEY,
    value TEXT NOT NULL,

    expires_utc TIMESTAMP NOT NULL,  -- naive UTC
    path TEXT NOT NULL
);
"""


def create_schema(conn) -> None:
    """
    Create tables. No migrations. Safe to call on every open.
    """
    conn.execute(COOKIES_DDL)
