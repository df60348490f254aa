"""Analyzer utilities turning raw text into canonical keywords.

The design mirrors Whoosh's composable tokenizer/filter chain: a tokenizer
emits tokens, filters rewrite or drop them, and an analyzer wires the chain.
Indexed text goes through the full chain; queries only get lowercasing and
lemma resolution (see ``normalize_query``).
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from itertools import groupby
import re
from typing import Protocol


_KEYWORD_SEPARATORS = re.compile(r"[, ]")

SHORT_WORD_MAX_LENGTH = 2


@dataclass(frozen=True, slots=True)
class Token:
    """A token emitted by the tokenizer."""

    text: str
    position: int
    start_char: int
    end_char: int


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class LetterTokenizer:
    """Splits text on every non-letter character.

    A letter is anything ``str.isalpha`` accepts, so superscripts and
    fractions are boundaries as well as digits.
    """

    def __call__(self, text: str) -> Iterator[Token]:
        position = 0
        start = 0
        for is_letter, run in groupby(text, str.isalpha):
            end = start + sum(1 for _ in run)
            if is_letter:
                yield Token(text=text[start:end], position=position, start_char=start, end_char=end)
                position += 1
            start = end


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.islower():
                yield token
            else:
                yield replace(token, text=token.text.lower())


class LemmaFilter:
    """Replaces each token by its lemma when the table knows it."""

    def __init__(self, lemmas: Mapping[str, str] | None) -> None:
        self.lemmas = lemmas

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        if self.lemmas is None:
            yield from tokens
            return
        for token in tokens:
            lemma = self.lemmas.get(token.text)
            yield token if lemma is None else replace(token, text=lemma)


class ShortWordFilter:
    """Drops tokens of ``max_length`` characters or fewer."""

    def __init__(self, max_length: int = SHORT_WORD_MAX_LENGTH) -> None:
        self.max_length = max_length

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if len(token.text) > self.max_length:
                yield token


class StopFilter:
    """Removes stopwords from the stream.

    Stopwords are compared against the already lowercased (and lemmatized)
    token text, so the set is expected to hold lowercase entries.
    """

    def __init__(self, stopwords: Collection[str] | None = None) -> None:
        self.stopwords = stopwords if isinstance(stopwords, (set, frozenset)) else frozenset(stopwords or ())

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text not in self.stopwords:
                yield token


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        return list(stream)


class KeywordAnalyzer:
    """Analyzer used for indexed content.

    Chain: letter tokenizer, lowercase, lemma resolution, short-word removal,
    stopword removal. Lemma resolution runs before both removals so that the
    canonical form is what gets measured and compared.
    """

    def __init__(
        self,
        stopwords: Collection[str] | None = None,
        lemmas: Mapping[str, str] | None = None,
    ) -> None:
        filters: list[TokenFilter] = [
            LowercaseFilter(),
            LemmaFilter(lemmas),
            ShortWordFilter(),
            StopFilter(stopwords),
        ]
        self.pipeline = AnalyzerPipeline(LetterTokenizer(), filters)

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text)

    def keywords(self, text: str) -> list[str]:
        return [token.text for token in self.pipeline(text)]


def normalize(
    text: str,
    stopwords: Collection[str],
    lemmas: Mapping[str, str] | None = None,
) -> list[str]:
    """Turn raw text into the sequence of keywords to index.

    Args:
        text: Raw document text.
        stopwords: Words excluded from indexing.
        lemmas: Optional surface-form to lemma table.

    Returns:
        Surviving keywords in text order. Callers aggregate by word, so order
        carries no meaning.

    Examples:
        >>> normalize("Café, CAFÉ!", stopwords=set())
        ['café', 'café']
        >>> normalize("le chat et la souris", stopwords={"et"})
        ['chat', 'souris']
    """
    return KeywordAnalyzer(stopwords, lemmas).keywords(text)


def resolve_lemma(word: str, lemmas: Mapping[str, str] | None) -> str:
    """Return the lemma of ``word``, or ``word`` itself when unknown."""
    if lemmas is None:
        return word
    return lemmas.get(word, word)


def split_keywords(raw: str) -> list[str]:
    """Split declared keyword metadata on commas and spaces."""
    return [part for part in _KEYWORD_SEPARATORS.split(raw) if part]


def normalize_query(query: str, lemmas: Mapping[str, str] | None = None) -> list[str]:
    """Canonicalize query terms.

    Queries are split on whitespace, lowercased and lemmatized. No stopword or
    short-word filtering applies: a user asking for "du" gets exactly that.
    """
    return [resolve_lemma(term.lower(), lemmas) for term in query.split()]
