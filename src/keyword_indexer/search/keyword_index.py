"""Keyword index: weighted insertion and ranked multi-term search.

The index owns the algorithms; the repository it wraps owns persistence and
transactions. Every storage failure propagates as ``StorageError`` and no
partial ranking is ever returned.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import logging

from keyword_indexer.adapters.keyword_repository import AbstractKeywordRepository
from keyword_indexer.domain.errors import DocumentNotFoundError, InputError
from keyword_indexer.domain.model import Document
from keyword_indexer.domain.search import RankedDocument, RankedKeyword


logger = logging.getLogger(__name__)

DEFAULT_WEIGHT = 1
SIGNAL_WEIGHT = 2


@dataclass(frozen=True, slots=True)
class KeywordWeights:
    """Weights credited per keyword channel.

    Declared keywords outrank words that merely occur in the body.
    """

    signal: int = SIGNAL_WEIGHT
    body: int = DEFAULT_WEIGHT


class KeywordIndex:
    """Ranked keyword index over a keyword repository."""

    def __init__(self, repository: AbstractKeywordRepository) -> None:
        self.repository = repository

    def insert_word(self, word: str, document: str, weight: int = DEFAULT_WEIGHT) -> None:
        """Credit ``weight`` to (word, document).

        Repeated insertions accumulate: weights 2 then 1 leave a single
        occurrence with count 3.

        Raises:
            InputError: If ``weight`` is not a positive integer.
            DocumentNotFoundError: If ``document`` is not indexed.
        """
        if isinstance(weight, bool) or not isinstance(weight, int) or weight < 1:
            raise InputError(f"Keyword weight must be a positive integer, got {weight!r}")
        if not self.repository.document_exists(document):
            raise DocumentNotFoundError(document)
        self.repository.increment_occurrence(word, document, weight)

    def add_document(
        self,
        document: Document,
        signal_keywords: Iterable[str],
        body_keywords: Iterable[str],
        weights: KeywordWeights | None = None,
    ) -> int:
        """Create ``document`` and insert both keyword channels.

        The caller is expected to run this inside one unit of work so that
        the document and its keywords appear (or fail) together.

        Returns:
            Number of keyword insertions performed.
        """
        weights = weights or KeywordWeights()
        self.repository.create_document(document)
        inserted = 0
        for word in signal_keywords:
            self.insert_word(word, document.name, weights.signal)
            inserted += 1
        for word in body_keywords:
            self.insert_word(word, document.name, weights.body)
            inserted += 1
        logger.debug("Inserted %d keywords for %s", inserted, document.name)
        return inserted

    def search(self, terms: Sequence[str]) -> list[RankedDocument]:
        """Rank documents by their summed occurrence counts over ``terms``.

        A document matching k terms with counts c1..ck scores c1 + ... + ck.
        Documents matching no term are absent. Ties are ordered by document
        name so results are reproducible.
        """
        if not terms:
            return []

        totals: dict[str, int] = defaultdict(int)
        documents: dict[str, Document] = {}
        for term in terms:
            matches = self.repository.find_occurrences(term)
            logger.debug("Documents for term %r: %d", term, len(matches))
            for document, count in matches:
                documents[document.name] = document
                totals[document.name] += count

        ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
        return [RankedDocument.from_document(documents[name], hits) for name, hits in ranked]

    def list_keywords_for_document(self, document: str) -> list[RankedKeyword]:
        """Return the keywords of one document, heaviest first."""
        occurrences = self.repository.list_occurrences(document)
        ordered = sorted(occurrences, key=lambda occurrence: (-occurrence.occurrences, occurrence.word))
        return [RankedKeyword(keyword=occurrence.word, rank=occurrence.occurrences) for occurrence in ordered]

    def get_document(self, name: str) -> Document | None:
        return self.repository.get_document(name)

    def delete_document(self, name: str) -> bool:
        return self.repository.delete_document(name)

    def list_documents(self) -> list[Document]:
        return self.repository.list_documents()
