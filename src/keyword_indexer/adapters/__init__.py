"""Adapters layer - storage implementations of the keyword repository."""

from keyword_indexer.adapters.keyword_repository import (
    AbstractKeywordRepository,
    InMemoryKeywordRepository,
    SqliteKeywordRepository,
)


__all__ = ["AbstractKeywordRepository", "InMemoryKeywordRepository", "SqliteKeywordRepository"]
