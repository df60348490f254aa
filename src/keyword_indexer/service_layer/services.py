"""Service layer - ingestion and administration use cases.

Each use case takes a unit of work and commits it explicitly; anything that
raises before the commit leaves storage untouched.
"""

from __future__ import annotations

import hashlib
import logging

from keyword_indexer.domain.errors import DocumentNotFoundError, InputError
from keyword_indexer.domain.model import DocType, Document, ExtractedDocument
from keyword_indexer.domain.search import RankedKeyword
from keyword_indexer.observability.metrics import INDEXED_DOCUMENTS, INDEXED_KEYWORDS
from keyword_indexer.observability.tracing import create_span
from keyword_indexer.search.analyzers import KeywordAnalyzer, resolve_lemma, split_keywords
from keyword_indexer.search.keyword_index import KeywordIndex, KeywordWeights
from keyword_indexer.search.lexicon import LexicalResources
from keyword_indexer.service_layer.unit_of_work import AbstractUnitOfWork


logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION_LENGTH = 120


def upload_identifier(content: bytes, filename: str) -> str:
    """Name an uploaded file by its SHA-256 digest followed by its filename."""
    return f"{hashlib.sha256(content).hexdigest()}-{filename}"


def decode_body(body: str | bytes) -> str:
    """Decode extracted body text.

    Raises:
        InputError: If ``body`` is bytes that are not valid UTF-8.
    """
    if isinstance(body, str):
        return body
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InputError(f"Extracted text is not valid UTF-8: {exc}") from exc


def derive_description(extracted: ExtractedDocument, body: str, length: int = DEFAULT_DESCRIPTION_LENGTH) -> str:
    """Use the declared description, else the start of the body on one line."""
    if extracted.description:
        return extracted.description
    return body[:length].replace("\n", " ").strip()


def signal_keywords(raw: str | list[str], resources: LexicalResources) -> list[str]:
    """Canonicalize declared keywords the same way query terms are."""
    items = [raw] if isinstance(raw, str) else raw
    parts = [part for item in items for part in split_keywords(item) if part.strip()]
    return [resolve_lemma(part.strip().lower(), resources.lemmas) for part in parts]


def index_document(
    uow: AbstractUnitOfWork,
    resources: LexicalResources,
    identifier: str,
    doctype: DocType,
    extracted: ExtractedDocument,
    *,
    weights: KeywordWeights | None = None,
    description_length: int = DEFAULT_DESCRIPTION_LENGTH,
) -> Document:
    """Create a document and index both of its keyword channels atomically.

    Service layer use case:
    1. Decode and normalize the body
    2. Canonicalize the declared keywords
    3. Create the document and insert every keyword
    4. Commit transaction

    Args:
        uow: Unit of Work for transaction management
        resources: Stopwords and lemma table used for normalization
        identifier: Document name (URL or upload identifier)
        doctype: Online (URL) or offline (upload)
        extracted: Strings supplied by the extraction collaborator
        weights: Per-channel weights, defaults to signal=2 and body=1
        description_length: Fallback description length

    Returns:
        The stored Document

    Raises:
        InputError: If the body cannot be decoded
        DocumentExistsError: If ``identifier`` is already indexed
        StorageError: On any storage failure
    """
    weights = weights or KeywordWeights()
    body = decode_body(extracted.body)
    analyzer = KeywordAnalyzer(resources.stopwords, resources.lemmas)
    body_keywords = analyzer.keywords(body)
    declared = signal_keywords(extracted.keywords, resources)
    document = Document(
        name=identifier,
        title=extracted.title,
        doctype=doctype,
        description=derive_description(extracted, body, description_length),
    )

    logger.info("Inserting %s in database", identifier)
    with create_span("index.document", attributes={"document.doctype": doctype.value}):
        try:
            with uow:
                KeywordIndex(uow.keywords).add_document(document, declared, body_keywords, weights)
                uow.commit()
        except Exception:
            INDEXED_DOCUMENTS.labels(outcome="failed").inc()
            raise

    INDEXED_DOCUMENTS.labels(outcome="indexed").inc()
    INDEXED_KEYWORDS.labels(channel="signal").inc(len(declared))
    INDEXED_KEYWORDS.labels(channel="body").inc(len(body_keywords))
    logger.info("Indexed %s (%d declared, %d body keywords)", identifier, len(declared), len(body_keywords))
    return document


def delete_document(uow: AbstractUnitOfWork, name: str) -> None:
    """Delete a document; its keyword occurrences go with it.

    Raises:
        DocumentNotFoundError: If no such document is indexed
    """
    logger.info("Deleting document %r", name)
    with uow:
        if not KeywordIndex(uow.keywords).delete_document(name):
            raise DocumentNotFoundError(name)
        uow.commit()
    logger.info("Deleted document %r", name)


def get_document(uow: AbstractUnitOfWork, name: str) -> Document | None:
    with uow:
        return KeywordIndex(uow.keywords).get_document(name)


def list_documents(uow: AbstractUnitOfWork) -> list[Document]:
    """List indexed documents ordered by name."""
    with uow:
        return KeywordIndex(uow.keywords).list_documents()


def document_keywords(uow: AbstractUnitOfWork, name: str) -> list[RankedKeyword]:
    """List the keywords of one document, heaviest first."""
    with uow:
        return KeywordIndex(uow.keywords).list_keywords_for_document(name)
