"""Domain model - entities and value objects of the keyword index.

Entities are Pydantic dataclasses so construction validates their invariants;
value objects handed over by collaborators are frozen.
"""

from enum import Enum
from typing import Annotated

from pydantic import Field
from pydantic.dataclasses import dataclass


class DocType(str, Enum):
    """Where a document came from."""

    ONLINE = "online"  # fetched by URL
    OFFLINE = "offline"  # uploaded file


@dataclass(frozen=True)
class Document:
    """An indexed document, identified by its URL or content-hash name.

    Documents are immutable once created; re-indexing means deleting first.
    """

    name: Annotated[str, Field(min_length=1)]
    title: str
    doctype: DocType
    description: str = ""


@dataclass(frozen=True)
class KeywordOccurrence:
    """Weight credited to a (word, document) pair."""

    word: Annotated[str, Field(min_length=1)]
    document: Annotated[str, Field(min_length=1)]
    occurrences: Annotated[int, Field(ge=1)] = 1


@dataclass(frozen=True)
class ExtractedDocument:
    """Strings handed over by the text-extraction collaborator.

    ``keywords`` holds the document-declared keyword metadata, either raw
    (comma or space separated) or already split. ``body`` may still be
    undecoded bytes; decoding happens at ingestion time.
    """

    title: str
    keywords: str | list[str] = ""
    body: str | bytes = ""
    description: str | None = None
