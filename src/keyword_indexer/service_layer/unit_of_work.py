"""Unit of Work for the keyword index.

A unit of work wraps one storage transaction. Leaving the ``with`` block
without calling ``commit()`` rolls everything back, so a failing ingestion
never leaves a document without its keywords.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
import sqlite3

from keyword_indexer.adapters.keyword_repository import (
    AbstractKeywordRepository,
    InMemoryKeywordRepository,
    SqliteKeywordRepository,
)
from keyword_indexer.domain.errors import StorageError
from keyword_indexer.search.sqlite_storage import SqliteKeywordStore


logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work."""

    keywords: AbstractKeywordRepository

    def __enter__(self):
        """Enter transaction context."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit transaction context - rollback unless explicitly committed."""
        if not getattr(self, "_committed", False):
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction."""
        raise NotImplementedError

    @abstractmethod
    def rollback(self):
        """Rollback the transaction."""
        raise NotImplementedError


class SqliteUnitOfWork(AbstractUnitOfWork):
    """Unit of Work holding one SQLite connection for the duration of the block.

    Each instance opens its own connection on enter and closes it on exit, so
    concurrent callers never share a transaction.
    """

    def __init__(self, store: SqliteKeywordStore) -> None:
        self.store = store
        self.conn: sqlite3.Connection | None = None
        self._committed = False

    def __enter__(self):
        self.conn = self.store.connect()
        try:
            self.conn.execute("BEGIN")
        except sqlite3.Error as exc:
            self.conn.close()
            self.conn = None
            raise StorageError(f"Failed to begin transaction: {exc}") from exc
        self.keywords = SqliteKeywordRepository(self.conn)
        self._committed = False
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            if self.conn is not None:
                self.conn.close()
                self.conn = None

    def commit(self):
        if self.conn is None:
            raise StorageError("Unit of work is not active")
        try:
            if self.conn.in_transaction:
                self.conn.execute("COMMIT")
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to commit transaction: {exc}") from exc
        self._committed = True

    def rollback(self):
        if self.conn is None:
            return
        try:
            if self.conn.in_transaction:
                self.conn.execute("ROLLBACK")
        except sqlite3.Error as exc:
            logger.warning("Rollback failed: %s", exc)
        self._committed = False


class FakeUnitOfWork(AbstractUnitOfWork):
    """In-memory Unit of Work for testing.

    The repository survives across blocks, like a database would; rollback
    restores the state captured on enter.
    """

    def __init__(self, repository: InMemoryKeywordRepository | None = None) -> None:
        self.keywords = repository or InMemoryKeywordRepository()
        self.committed = False
        self._committed = False
        self._snapshot = None

    def __enter__(self):
        self._snapshot = self.keywords.snapshot()
        self._committed = False
        return self

    def commit(self):
        self.committed = True
        self._committed = True
        self._snapshot = self.keywords.snapshot()

    def rollback(self):
        if self._snapshot is not None:
            self.keywords.restore(self._snapshot)
        self._committed = False
