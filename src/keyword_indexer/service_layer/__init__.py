"""Service layer - Business logic orchestration.

- Unit of Work for transaction management
- Ingestion and administration use cases
- Two-phase search orchestration
"""

from .search_service import SearchService
from .services import (
    delete_document,
    document_keywords,
    get_document,
    index_document,
    list_documents,
    upload_identifier,
)
from .unit_of_work import AbstractUnitOfWork, FakeUnitOfWork, SqliteUnitOfWork


__all__ = [
    "AbstractUnitOfWork",
    "FakeUnitOfWork",
    "SearchService",
    "SqliteUnitOfWork",
    "delete_document",
    "document_keywords",
    "get_document",
    "index_document",
    "list_documents",
    "upload_identifier",
]
