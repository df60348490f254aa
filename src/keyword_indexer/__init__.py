"""keyword-indexer: weighted keyword indexing with spelling-corrected search."""

from keyword_indexer.search.analyzers import normalize
from keyword_indexer.search.fuzzy import correct
from keyword_indexer.search.keyword_index import KeywordIndex
from keyword_indexer.service_layer.search_service import SearchService


__all__ = ["KeywordIndex", "SearchService", "correct", "normalize"]
