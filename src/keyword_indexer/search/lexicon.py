"""Lexical resources: stopwords, lemma table and spelling frequency dictionary.

Resources are loaded once at startup and then shared read-only between every
component and every concurrent caller. Nothing here is module-global: callers
build a ``LexicalResources`` value and pass it explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import csv
from dataclasses import dataclass, field
import logging
from pathlib import Path
from types import MappingProxyType

import orjson

from keyword_indexer.domain.errors import ResourceLoadError


logger = logging.getLogger(__name__)

# GLÀFF rows: surface form | grace tag | lemma | ipa | sampa | frequencies...
_GLAFF_WORD_COLUMN = 0
_GLAFF_LEMMA_COLUMN = 2


@dataclass(frozen=True, slots=True)
class FrequencyDictionary:
    """Word usage frequencies used by the spelling corrector."""

    words: Mapping[str, int]
    total: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.words, MappingProxyType):
            object.__setattr__(self, "words", MappingProxyType(dict(self.words)))
        if not self.total:
            object.__setattr__(self, "total", sum(self.words.values()))

    def __contains__(self, word: object) -> bool:
        return word in self.words

    def __len__(self) -> int:
        return len(self.words)

    @classmethod
    def from_counts(cls, counts: Mapping[str, int], total: int = 0) -> FrequencyDictionary:
        for word, score in counts.items():
            if not isinstance(score, int) or score < 0:
                raise ResourceLoadError(f"Invalid frequency {score!r} for word {word!r}")
        return cls(words=counts, total=int(total))


@dataclass(frozen=True, slots=True)
class LexicalResources:
    """Immutable bundle of the tables the normalizer and corrector consult."""

    stopwords: frozenset[str] = field(default_factory=frozenset)
    lemmas: Mapping[str, str] | None = None
    dictionary: FrequencyDictionary | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.stopwords, frozenset):
            object.__setattr__(self, "stopwords", frozenset(self.stopwords))
        if self.lemmas is not None and not isinstance(self.lemmas, MappingProxyType):
            object.__setattr__(self, "lemmas", MappingProxyType(dict(self.lemmas)))


def parse_stopwords(lines: Iterable[str]) -> frozenset[str]:
    """Build a stopword set from one-word-per-line content."""
    return frozenset(word for word in (line.strip().lower() for line in lines) if word)


def load_stopwords(path: Path | None) -> frozenset[str]:
    """Read the stopword list, one word per line."""
    if path is None:
        return frozenset()
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceLoadError(f"Cannot read stopwords from {path}: {exc}") from exc
    stopwords = parse_stopwords(content.splitlines())
    logger.info("Loaded %d stopwords from %s", len(stopwords), path)
    return stopwords


def parse_glaff(lines: Iterable[str]) -> dict[str, str]:
    """Parse the pipe-delimited GLÀFF lexicon into a surface -> lemma table.

    Later rows win when a surface form appears more than once, matching how
    the compiled table was produced.
    """
    lemmas: dict[str, str] = {}
    reader = csv.reader(lines, delimiter="|", quoting=csv.QUOTE_NONE)
    for line_number, row in enumerate(reader, start=1):
        if not row:
            continue
        if len(row) <= _GLAFF_LEMMA_COLUMN:
            raise ResourceLoadError(f"GLÀFF line {line_number} has {len(row)} columns, expected at least 3")
        lemmas[row[_GLAFF_WORD_COLUMN]] = row[_GLAFF_LEMMA_COLUMN]
    return lemmas


def load_lemma_table(path: Path | None) -> Mapping[str, str] | None:
    """Load the lemma table.

    A ``.json`` file holds a compiled ``{surface: lemma}`` object; anything
    else is read as the raw GLÀFF lexicon. ``None`` means no table, in which
    case every word is its own lemma.
    """
    if path is None:
        return None
    try:
        if path.suffix.lower() == ".json":
            payload = orjson.loads(path.read_bytes())
            if not isinstance(payload, dict) or not all(isinstance(v, str) for v in payload.values()):
                raise ResourceLoadError(f"Lemma table {path} must be a JSON object of strings")
            lemmas = payload
        else:
            with path.open(encoding="utf-8", newline="") as handle:
                lemmas = parse_glaff(handle)
    except (OSError, UnicodeDecodeError, orjson.JSONDecodeError) as exc:
        raise ResourceLoadError(f"Cannot read lemma table from {path}: {exc}") from exc
    logger.info("Loaded %d lemmas from %s", len(lemmas), path)
    return MappingProxyType(lemmas)


def load_frequency_dictionary(path: Path | None) -> FrequencyDictionary | None:
    """Load the spelling dictionary.

    Accepts ``{"words": {...}, "n": total}`` as written by the trainer, or a
    bare ``{word: frequency}`` object.
    """
    if path is None:
        return None
    try:
        payload = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        raise ResourceLoadError(f"Cannot read dictionary from {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ResourceLoadError(f"Dictionary {path} must be a JSON object")

    if isinstance(payload.get("words"), dict):
        dictionary = FrequencyDictionary.from_counts(payload["words"], total=payload.get("n") or 0)
    else:
        dictionary = FrequencyDictionary.from_counts(payload)
    logger.info("Loaded %d dictionary words from %s", len(dictionary), path)
    return dictionary


def load_resources(
    stopwords_path: Path | None = None,
    lemma_table_path: Path | None = None,
    dictionary_path: Path | None = None,
) -> LexicalResources:
    """Load every lexical resource; missing paths yield empty/absent tables."""
    return LexicalResources(
        stopwords=load_stopwords(stopwords_path),
        lemmas=load_lemma_table(lemma_table_path),
        dictionary=load_frequency_dictionary(dictionary_path),
    )
