"""Shared SQLite PRAGMA helpers applied to every index connection."""

from __future__ import annotations

import sqlite3


def apply_connection_pragmas(
    conn: sqlite3.Connection,
    *,
    busy_timeout_ms: int | None = 30000,
    cache_size_kb: int = -16384,
    journal_mode: str = "WAL",
    synchronous: str = "NORMAL",
) -> None:
    """Apply integrity and concurrency PRAGMAs.

    ``foreign_keys`` is always enabled: keyword rows cascade with their
    document and cannot reference a missing one.
    """
    if busy_timeout_ms is not None:
        conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms}")
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute(f"PRAGMA journal_mode = {journal_mode}")
    conn.execute(f"PRAGMA synchronous = {synchronous}")
    conn.execute(f"PRAGMA cache_size = {cache_size_kb}")
