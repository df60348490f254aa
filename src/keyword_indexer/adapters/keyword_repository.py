"""Keyword repository abstractions and implementations.

The repository is the storage collaborator of the keyword index: documents
plus (word, document, occurrences) facts. Implementations never retry; a
storage failure surfaces as ``StorageError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
import copy
import logging
import sqlite3

from keyword_indexer.domain.errors import DocumentExistsError, DocumentNotFoundError, StorageError
from keyword_indexer.domain.model import DocType, Document, KeywordOccurrence
from keyword_indexer.search import sqlite_storage as sql


logger = logging.getLogger(__name__)


class AbstractKeywordRepository(ABC):
    """Abstract storage for documents and their keyword occurrences."""

    @abstractmethod
    def document_exists(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_document(self, name: str) -> Document | None:
        raise NotImplementedError

    @abstractmethod
    def create_document(self, document: Document) -> None:
        """Insert a new document; raises ``DocumentExistsError`` on duplicates."""
        raise NotImplementedError

    @abstractmethod
    def delete_document(self, name: str) -> bool:
        """Delete a document and every occurrence attached to it.

        Returns:
            True when a document was deleted.
        """
        raise NotImplementedError

    @abstractmethod
    def list_documents(self) -> list[Document]:
        raise NotImplementedError

    @abstractmethod
    def get_occurrence(self, word: str, document: str) -> int | None:
        raise NotImplementedError

    @abstractmethod
    def set_occurrence(self, word: str, document: str, count: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def increment_occurrence(self, word: str, document: str, weight: int) -> None:
        """Add ``weight`` to the count of (word, document), creating the row if needed.

        Must be a single atomic step at the storage boundary.
        """
        raise NotImplementedError

    @abstractmethod
    def find_occurrences(self, word: str) -> list[tuple[Document, int]]:
        """Return every (document, count) pair where ``word`` occurs."""
        raise NotImplementedError

    @abstractmethod
    def list_occurrences(self, document: str) -> list[KeywordOccurrence]:
        raise NotImplementedError


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        logger.error("Storage failure during %s: %s", operation, exc)
        raise StorageError(f"Failed to {operation}: {exc}") from exc


def _row_to_document(row: tuple) -> Document:
    name, title, doctype, description = row[:4]
    return Document(name=name, title=title, doctype=DocType(doctype), description=description)


class SqliteKeywordRepository(AbstractKeywordRepository):
    """Repository bound to one SQLite connection (and its transaction)."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def document_exists(self, name: str) -> bool:
        with _storage_errors("check document"):
            return self.conn.execute(sql.DOCUMENT_EXISTS, (name,)).fetchone() is not None

    def get_document(self, name: str) -> Document | None:
        with _storage_errors("load document"):
            row = self.conn.execute(sql.SELECT_DOCUMENT, (name,)).fetchone()
        return _row_to_document(row) if row else None

    def create_document(self, document: Document) -> None:
        values = (document.name, document.title, document.doctype.value, document.description)
        try:
            self.conn.execute(sql.INSERT_DOCUMENT, values)
        except sqlite3.IntegrityError as exc:
            raise DocumentExistsError(document.name) from exc
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to insert document: {exc}") from exc

    def delete_document(self, name: str) -> bool:
        with _storage_errors("delete document"):
            cursor = self.conn.execute(sql.DELETE_DOCUMENT, (name,))
        return cursor.rowcount > 0

    def list_documents(self) -> list[Document]:
        with _storage_errors("list documents"):
            rows = self.conn.execute(sql.SELECT_DOCUMENTS).fetchall()
        return [_row_to_document(row) for row in rows]

    def get_occurrence(self, word: str, document: str) -> int | None:
        with _storage_errors("load occurrence"):
            row = self.conn.execute(sql.SELECT_OCCURRENCE, (word, document)).fetchone()
        return int(row[0]) if row else None

    def set_occurrence(self, word: str, document: str, count: int) -> None:
        with _storage_errors("store occurrence"):
            self.conn.execute(sql.UPSERT_OCCURRENCE, (word, document, count))

    def increment_occurrence(self, word: str, document: str, weight: int) -> None:
        with _storage_errors("increment occurrence"):
            self.conn.execute(sql.INCREMENT_OCCURRENCE, (word, document, weight))

    def find_occurrences(self, word: str) -> list[tuple[Document, int]]:
        with _storage_errors("search keyword"):
            rows = self.conn.execute(sql.SELECT_OCCURRENCES_FOR_WORD, (word,)).fetchall()
        return [(_row_to_document(row), int(row[4])) for row in rows]

    def list_occurrences(self, document: str) -> list[KeywordOccurrence]:
        with _storage_errors("list keywords"):
            rows = self.conn.execute(sql.SELECT_OCCURRENCES_FOR_DOCUMENT, (document,)).fetchall()
        return [KeywordOccurrence(word=word, document=document, occurrences=count) for word, count in rows]


class InMemoryKeywordRepository(AbstractKeywordRepository):
    """Dict-backed repository for tests and ephemeral indexes.

    Enforces the same invariants as the SQLite schema: occurrences need an
    existing document and disappear with it.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._occurrences: dict[tuple[str, str], int] = {}

    def snapshot(self) -> tuple[dict[str, Document], dict[tuple[str, str], int]]:
        return copy.copy(self._documents), copy.copy(self._occurrences)

    def restore(self, state: tuple[dict[str, Document], dict[tuple[str, str], int]]) -> None:
        documents, occurrences = state
        self._documents = dict(documents)
        self._occurrences = dict(occurrences)

    def document_exists(self, name: str) -> bool:
        return name in self._documents

    def get_document(self, name: str) -> Document | None:
        return self._documents.get(name)

    def create_document(self, document: Document) -> None:
        if document.name in self._documents:
            raise DocumentExistsError(document.name)
        self._documents[document.name] = document

    def delete_document(self, name: str) -> bool:
        if self._documents.pop(name, None) is None:
            return False
        for key in [key for key in self._occurrences if key[1] == name]:
            del self._occurrences[key]
        return True

    def list_documents(self) -> list[Document]:
        return [self._documents[name] for name in sorted(self._documents)]

    def get_occurrence(self, word: str, document: str) -> int | None:
        return self._occurrences.get((word, document))

    def set_occurrence(self, word: str, document: str, count: int) -> None:
        self._require_document(document)
        self._occurrences[(word, document)] = count

    def increment_occurrence(self, word: str, document: str, weight: int) -> None:
        self._require_document(document)
        key = (word, document)
        self._occurrences[key] = self._occurrences.get(key, 0) + weight

    def find_occurrences(self, word: str) -> list[tuple[Document, int]]:
        return [
            (self._documents[document], count)
            for (occurrence_word, document), count in self._occurrences.items()
            if occurrence_word == word
        ]

    def list_occurrences(self, document: str) -> list[KeywordOccurrence]:
        return [
            KeywordOccurrence(word=word, document=name, occurrences=count)
            for (word, name), count in self._occurrences.items()
            if name == document
        ]

    def _require_document(self, document: str) -> None:
        if document not in self._documents:
            raise DocumentNotFoundError(document)
