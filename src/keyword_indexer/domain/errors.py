"""Error taxonomy shared by the indexer layers.

Storage and resource failures are chained to the exception that caused them
so callers can still inspect the underlying driver error.
"""


class IndexerError(Exception):
    """Base class for every error raised by the indexer."""


class InputError(IndexerError, ValueError):
    """Raised when extracted text or an ingestion argument is malformed."""


class DocumentNotFoundError(IndexerError, LookupError):
    """Raised when an operation targets a document that does not exist."""

    def __init__(self, document: str) -> None:
        super().__init__(f"Document {document!r} does not exist")
        self.document = document


class StorageError(IndexerError, RuntimeError):
    """Raised when the storage collaborator fails."""


class DocumentExistsError(StorageError):
    """Raised when a document identifier is already indexed."""

    def __init__(self, document: str) -> None:
        super().__init__(f"Document {document!r} is already indexed")
        self.document = document


class ResourceLoadError(IndexerError):
    """Raised when a lexical resource file cannot be read or parsed."""
