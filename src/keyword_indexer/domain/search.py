"""Domain models for search results.

Value objects are immutable (frozen=True) and never persisted; they only carry
ranked results back to the caller.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from keyword_indexer.domain.model import Document


class SearchPhase(str, Enum):
    """Phases of the two-step search; both are terminal."""

    INITIAL = "initial"
    USING_SUGGESTION = "using_suggestion"


class RankedKeyword(BaseModel):
    """A keyword of one document with its accumulated weight."""

    model_config = ConfigDict(frozen=True)

    keyword: str
    rank: int


class RankedDocument(BaseModel):
    """A document matched by a query with its aggregate hit count."""

    model_config = ConfigDict(frozen=True)

    doc: str
    title: str
    description: str
    hits: int

    @classmethod
    def from_document(cls, document: Document, hits: int) -> "RankedDocument":
        return cls(doc=document.name, title=document.title, description=document.description, hits=hits)


class QueryResult(BaseModel):
    """Outcome of a search, with spelling-suggestion metadata.

    ``spelling_suggestion`` is only set when the corrected query was actually
    used to produce ``results``.
    """

    model_config = ConfigDict(frozen=True)

    results: list[RankedDocument] = Field(default_factory=list)
    spelling_suggestion: str | None = None
    using_suggestion: bool = False

    @property
    def phase(self) -> SearchPhase:
        return SearchPhase.USING_SUGGESTION if self.using_suggestion else SearchPhase.INITIAL
