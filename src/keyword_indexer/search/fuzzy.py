"""Spelling correction for query terms.

Classic single/double-edit correction over a word-frequency table: generate
every string one edit away from the input, keep the most frequent one found in
the dictionary, and only look two edits away when nothing is one edit away.

Smart defaults:
- Known words are never corrected
- Distance-1 candidates always beat distance-2 candidates
- Frequency ties go to the lexicographically smallest word
- Words longer than ``max_length`` are returned as-is (distance 2 grows with
  the square of word length times alphabet size)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging

from keyword_indexer.search.lexicon import FrequencyDictionary


logger = logging.getLogger(__name__)

# Every letter used by the indexed languages.
ALPHABET = "aàâbcdeéèëêfghiîïjklmnoôpqrstuûüvwxyÿz"

DEFAULT_MAX_WORD_LENGTH = 24


def edit_variants(word: str) -> list[str]:
    """Return every string one edit away from ``word``.

    For each split of ``word`` into ``prefix + suffix`` with a non-empty
    suffix this yields a deletion, a transposition (when the suffix has two
    characters or more), and an alteration and an insertion for every letter
    of ``ALPHABET``. Duplicates are kept.

    Examples:
        >>> "cat" in edit_variants("chat")
        True
        >>> "hcat" in edit_variants("chat")
        True
    """
    variants: list[str] = []
    for i in range(len(word)):
        prefix, suffix = word[:i], word[i:]
        variants.append(prefix + suffix[1:])
        if len(suffix) >= 2:
            variants.append(prefix + suffix[1] + suffix[0] + suffix[2:])
        for letter in ALPHABET:
            variants.append(prefix + letter + suffix[1:])
            variants.append(prefix + letter + suffix)
    return variants


def best_candidate(candidates: Iterable[str], words: Mapping[str, int]) -> str | None:
    """Return the most frequent candidate known to ``words``.

    Ties on frequency are broken by taking the lexicographically smallest
    word, so the result never depends on candidate order.
    """
    best_word: str | None = None
    best_score = -1
    for candidate in candidates:
        score = words.get(candidate)
        if score is None:
            continue
        if score > best_score or (score == best_score and candidate < best_word):
            best_word, best_score = candidate, score
    return best_word


def correct(
    word: str,
    dictionary: Mapping[str, int] | FrequencyDictionary | None = None,
    *,
    max_length: int | None = None,
) -> str:
    """Propose the most plausible in-dictionary spelling of ``word``.

    Args:
        word: Term to correct, already lowercased.
        dictionary: Word frequencies; ``None`` disables correction.
        max_length: Words longer than this are returned unchanged.

    Returns:
        The best candidate at edit distance 1, else at distance 2, else
        ``word`` itself. Returning ``word`` unchanged is the normal "no
        suggestion" outcome, not an error.
    """
    if dictionary is None:
        return word
    words = dictionary.words if isinstance(dictionary, FrequencyDictionary) else dictionary
    if word in words:
        return word
    if max_length is not None and len(word) > max_length:
        logger.debug("Skipping correction of %d-character word", len(word))
        return word

    first_edits = set(edit_variants(word))
    found = best_candidate(first_edits, words)
    if found is not None:
        return found

    found = best_candidate((second for edit in first_edits for second in edit_variants(edit)), words)
    if found is not None:
        return found
    return word


@dataclass(frozen=True, slots=True)
class SpellingCorrector:
    """Corrector bound to one frequency dictionary and a length limit."""

    dictionary: FrequencyDictionary | None = None
    max_length: int = DEFAULT_MAX_WORD_LENGTH

    @property
    def enabled(self) -> bool:
        return self.dictionary is not None

    def correct(self, word: str) -> str:
        return correct(word, self.dictionary, max_length=self.max_length)
