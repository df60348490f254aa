"""Composable builder wiring settings, resources, storage and services."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from keyword_indexer.config import Settings
from keyword_indexer.domain.model import DocType, Document, ExtractedDocument
from keyword_indexer.domain.search import QueryResult, RankedKeyword
from keyword_indexer.observability import configure_logging, init_tracing
from keyword_indexer.search.fuzzy import SpellingCorrector
from keyword_indexer.search.keyword_index import KeywordWeights
from keyword_indexer.search.lexicon import LexicalResources, load_resources
from keyword_indexer.search.sqlite_storage import SqliteKeywordStore
from keyword_indexer.service_layer import services
from keyword_indexer.service_layer.search_service import SearchService
from keyword_indexer.service_layer.unit_of_work import SqliteUnitOfWork


logger = logging.getLogger(__name__)


@dataclass
class IndexerRuntime:
    """Everything a surrounding service needs to index and search documents."""

    settings: Settings
    resources: LexicalResources
    store: SqliteKeywordStore
    search_service: SearchService

    @property
    def weights(self) -> KeywordWeights:
        return KeywordWeights(signal=self.settings.signal_keyword_weight, body=self.settings.body_keyword_weight)

    def unit_of_work(self) -> SqliteUnitOfWork:
        return SqliteUnitOfWork(self.store)

    def search(self, query: str) -> QueryResult:
        return self.search_service.search(query)

    def spelling(self, word: str) -> str:
        return self.search_service.spelling(word)

    def index_document(self, identifier: str, doctype: DocType, extracted: ExtractedDocument) -> Document:
        return services.index_document(
            self.unit_of_work(),
            self.resources,
            identifier,
            doctype,
            extracted,
            weights=self.weights,
            description_length=self.settings.description_length,
        )

    def index_url(self, url: str, extracted: ExtractedDocument) -> Document:
        """Index a document fetched from ``url``; the URL is its name."""
        return self.index_document(url, DocType.ONLINE, extracted)

    def index_upload(self, content: bytes, filename: str, extracted: ExtractedDocument) -> Document:
        """Index an uploaded file under its content-hash name."""
        return self.index_document(services.upload_identifier(content, filename), DocType.OFFLINE, extracted)

    def delete_document(self, name: str) -> None:
        services.delete_document(self.unit_of_work(), name)

    def get_document(self, name: str) -> Document | None:
        return services.get_document(self.unit_of_work(), name)

    def list_documents(self) -> list[Document]:
        return services.list_documents(self.unit_of_work())

    def document_keywords(self, name: str) -> list[RankedKeyword]:
        return services.document_keywords(self.unit_of_work(), name)


def build_runtime(settings: Settings | None = None, *, configure_observability: bool = True) -> IndexerRuntime:
    """Load configuration and resources, migrate storage and build the services.

    Args:
        settings: Explicit settings; read from the environment when omitted
        configure_observability: Install logging and tracing providers
    """
    settings = settings or Settings()
    if configure_observability:
        configure_logging(level=settings.log_level, json_output=settings.log_json, service=settings.service_name)
        init_tracing(service_name=settings.service_name)

    logger.info("Reading lexical resources")
    resources = load_resources(
        stopwords_path=settings.stopwords_path,
        lemma_table_path=settings.lemma_table_path,
        dictionary_path=settings.dictionary_path,
    )

    store = SqliteKeywordStore(settings.database_path)
    logger.info("Running database migrations")
    store.migrate()

    corrector = SpellingCorrector(resources.dictionary, max_length=settings.spelling_max_word_length)
    search_service = SearchService(lambda: SqliteUnitOfWork(store), resources, corrector)
    return IndexerRuntime(settings=settings, resources=resources, store=store, search_service=search_service)
