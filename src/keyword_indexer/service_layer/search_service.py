"""Search service orchestration layer.

Combines query normalization, spelling correction and keyword index search
into the two-phase search protocol:

1. ``INITIAL``: search the normalized query. Its result is final when it is
   non-empty or when correction changed nothing.
2. ``USING_SUGGESTION``: search the corrected query once and return whatever
   it yields, flagged as such. There is no third attempt.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging

from keyword_indexer.domain.search import QueryResult, RankedDocument, SearchPhase
from keyword_indexer.observability.metrics import SEARCH_COUNT, SEARCH_LATENCY, SPELLING_CORRECTIONS, track_latency
from keyword_indexer.observability.tracing import create_span
from keyword_indexer.search.analyzers import normalize_query, resolve_lemma
from keyword_indexer.search.fuzzy import SpellingCorrector
from keyword_indexer.search.keyword_index import KeywordIndex
from keyword_indexer.search.lexicon import LexicalResources
from keyword_indexer.service_layer.unit_of_work import AbstractUnitOfWork


logger = logging.getLogger(__name__)


class SearchService:
    """High-level search orchestration service.

    Stateless apart from the immutable lexical resources, so one instance can
    serve concurrent callers; each search opens its own unit of work.
    """

    def __init__(
        self,
        uow_factory: Callable[[], AbstractUnitOfWork],
        resources: LexicalResources,
        corrector: SpellingCorrector | None = None,
    ) -> None:
        """Initialize search service with dependencies.

        Args:
            uow_factory: Returns a fresh unit of work per search
            resources: Lexical resources (only the lemma table is used for queries)
            corrector: Spelling corrector; defaults to one over ``resources.dictionary``
        """
        self.uow_factory = uow_factory
        self.resources = resources
        self.corrector = corrector or SpellingCorrector(resources.dictionary)

    def normalize(self, raw_query: str) -> list[str]:
        return normalize_query(raw_query, self.resources.lemmas)

    def suggest(self, terms: Sequence[str]) -> list[str]:
        """Correct every term independently and canonicalize the corrections."""
        suggestion = [resolve_lemma(self.corrector.correct(term), self.resources.lemmas) for term in terms]
        for term, corrected in zip(terms, suggestion, strict=True):
            SPELLING_CORRECTIONS.labels(outcome="unchanged" if term == corrected else "corrected").inc()
        return suggestion

    def spelling(self, word: str) -> str:
        """Correct a single word, without lemma resolution."""
        return self.corrector.correct(word)

    def search(self, raw_query: str) -> QueryResult:
        """Search documents matching ``raw_query``, falling back to its correction.

        Returns:
            QueryResult whose ``using_suggestion`` tells which phase produced
            the results. Zero results is a valid outcome in both phases.
        """
        logger.info("Query %r", raw_query)
        if not raw_query or not raw_query.strip():
            SEARCH_COUNT.labels(phase="empty").inc()
            return QueryResult()

        terms = self.normalize(raw_query)
        logger.debug("Normalized query: %s", terms)
        suggestion = self.suggest(terms)
        logger.debug("Suggested query: %s", suggestion)

        with create_span("search.query", attributes={"search.term_count": len(terms)}) as span:
            with self.uow_factory() as uow:
                index = KeywordIndex(uow.keywords)
                results = self._run_phase(index, SearchPhase.INITIAL, terms)
                if results or suggestion == terms:
                    span.set_attribute("search.phase", SearchPhase.INITIAL.value)
                    SEARCH_COUNT.labels(phase=SearchPhase.INITIAL.value).inc()
                    return QueryResult(results=results)

                results = self._run_phase(index, SearchPhase.USING_SUGGESTION, suggestion)

            span.set_attribute("search.phase", SearchPhase.USING_SUGGESTION.value)
            SEARCH_COUNT.labels(phase=SearchPhase.USING_SUGGESTION.value).inc()
            logger.info("No results for %r, used suggestion %r (%d results)", raw_query, suggestion, len(results))
            return QueryResult(
                results=results,
                spelling_suggestion=" ".join(suggestion),
                using_suggestion=True,
            )

    def _run_phase(self, index: KeywordIndex, phase: SearchPhase, terms: Sequence[str]) -> list[RankedDocument]:
        with track_latency(SEARCH_LATENCY, phase=phase.value):
            return index.search(terms)
