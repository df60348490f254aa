"""Domain layer - pure business objects with no infrastructure dependencies.

This layer contains:
- Entities: Document
- Value Objects: KeywordOccurrence, ExtractedDocument, ranked search results
- The error taxonomy shared by every layer
"""

from keyword_indexer.domain.errors import (
    DocumentExistsError,
    DocumentNotFoundError,
    IndexerError,
    InputError,
    ResourceLoadError,
    StorageError,
)
from keyword_indexer.domain.model import DocType, Document, ExtractedDocument, KeywordOccurrence
from keyword_indexer.domain.search import QueryResult, RankedDocument, RankedKeyword, SearchPhase


__all__ = [
    "DocType",
    "Document",
    "DocumentExistsError",
    "DocumentNotFoundError",
    "ExtractedDocument",
    "IndexerError",
    "InputError",
    "KeywordOccurrence",
    "QueryResult",
    "RankedDocument",
    "RankedKeyword",
    "ResourceLoadError",
    "SearchPhase",
    "StorageError",
]
