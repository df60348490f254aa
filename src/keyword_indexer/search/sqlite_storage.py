"""SQLite storage engine backing the keyword index.

The database holds two tables:
- ``documents``: one row per indexed document, keyed by its name
- ``keywords``: one row per (word, document) with the accumulated weight,
  cascading with its document

Schema changes are shipped as ordered migrations tracked with
``PRAGMA user_version``.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from pathlib import Path
import sqlite3
from typing import TYPE_CHECKING

from keyword_indexer.domain.errors import StorageError
from keyword_indexer.search.sqlite_pragmas import apply_connection_pragmas


if TYPE_CHECKING:
    from collections.abc import Iterator


logger = logging.getLogger(__name__)

_MIGRATIONS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS documents (
        name TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        doctype TEXT NOT NULL CHECK (doctype IN ('online', 'offline')),
        description TEXT NOT NULL DEFAULT ''
    ) WITHOUT ROWID;

    CREATE TABLE IF NOT EXISTS keywords (
        word TEXT NOT NULL,
        document TEXT NOT NULL REFERENCES documents(name) ON DELETE CASCADE,
        occurrences INTEGER NOT NULL DEFAULT 1 CHECK (occurrences > 0),
        PRIMARY KEY (word, document)
    ) WITHOUT ROWID;
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_keywords_document ON keywords(document);
    """,
)

SCHEMA_VERSION = len(_MIGRATIONS)

SELECT_DOCUMENT = "SELECT name, title, doctype, description FROM documents WHERE name = ?"
SELECT_DOCUMENTS = "SELECT name, title, doctype, description FROM documents ORDER BY name"
DOCUMENT_EXISTS = "SELECT 1 FROM documents WHERE name = ?"
INSERT_DOCUMENT = "INSERT INTO documents (name, title, doctype, description) VALUES (?, ?, ?, ?)"
DELETE_DOCUMENT = "DELETE FROM documents WHERE name = ?"
SELECT_OCCURRENCE = "SELECT occurrences FROM keywords WHERE word = ? AND document = ?"
UPSERT_OCCURRENCE = (
    "INSERT INTO keywords (word, document, occurrences) VALUES (?, ?, ?) "
    "ON CONFLICT (word, document) DO UPDATE SET occurrences = excluded.occurrences"
)
INCREMENT_OCCURRENCE = (
    "INSERT INTO keywords (word, document, occurrences) VALUES (?, ?, ?) "
    "ON CONFLICT (word, document) DO UPDATE SET occurrences = occurrences + excluded.occurrences"
)
SELECT_OCCURRENCES_FOR_WORD = (
    "SELECT d.name, d.title, d.doctype, d.description, k.occurrences "
    "FROM keywords AS k JOIN documents AS d ON d.name = k.document "
    "WHERE k.word = ?"
)
SELECT_OCCURRENCES_FOR_DOCUMENT = "SELECT word, occurrences FROM keywords WHERE document = ?"


class SqliteKeywordStore:
    """Owns the index database file and hands out configured connections."""

    def __init__(self, db_path: str | Path, *, busy_timeout_ms: int = 30000) -> None:
        self.db_path = Path(db_path)
        self.busy_timeout_ms = busy_timeout_ms

    def connect(self) -> sqlite3.Connection:
        """Open a connection in autocommit mode; transactions are explicit."""
        try:
            conn = sqlite3.connect(self.db_path, isolation_level=None, check_same_thread=False)
            apply_connection_pragmas(conn, busy_timeout_ms=self.busy_timeout_ms)
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to open index database {self.db_path}: {exc}") from exc
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    def schema_version(self) -> int:
        with self.connection() as conn:
            return int(conn.execute("PRAGMA user_version").fetchone()[0])

    def migrate(self) -> int:
        """Apply pending migrations and return how many ran."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.connection() as conn:
            try:
                current = int(conn.execute("PRAGMA user_version").fetchone()[0])
                pending = _MIGRATIONS[current:]
                for version, script in enumerate(pending, start=current + 1):
                    logger.info("Running index migration %d", version)
                    conn.executescript(f"BEGIN;\n{script}\nPRAGMA user_version = {version};\nCOMMIT;")
            except sqlite3.Error as exc:
                if conn.in_transaction:
                    conn.rollback()
                raise StorageError(f"Error running migrations: {exc}") from exc
        if pending:
            logger.info("Index schema now at version %d", SCHEMA_VERSION)
        return len(pending)
