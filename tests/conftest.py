"""Shared test fixtures and configuration."""

import pytest

from keyword_indexer.adapters import InMemoryKeywordRepository
from keyword_indexer.search.lexicon import FrequencyDictionary, LexicalResources
from keyword_indexer.search.sqlite_storage import SqliteKeywordStore
from keyword_indexer.service_layer.unit_of_work import FakeUnitOfWork


# Every variable Settings reads; cleared so the host environment never leaks in
CONFIG_ENV_VARS = (
    "DATABASE_PATH",
    "STOPWORDS_PATH",
    "LEMMA_TABLE_PATH",
    "DICTIONARY_PATH",
    "SIGNAL_KEYWORD_WEIGHT",
    "BODY_KEYWORD_WEIGHT",
    "DESCRIPTION_LENGTH",
    "SPELLING_MAX_WORD_LENGTH",
    "LOG_LEVEL",
    "LOG_JSON",
    "SERVICE_NAME",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Clear configuration variables before each test."""
    for key in CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def stopwords():
    return frozenset({"les", "des", "une", "dans", "pour", "avec", "the", "and"})


@pytest.fixture
def lemmas():
    return {
        "chats": "chat",
        "mangent": "manger",
        "mange": "manger",
        "chevaux": "cheval",
        "souris": "souris",
    }


@pytest.fixture
def dictionary():
    return FrequencyDictionary.from_counts(
        {
            "chat": 50,
            "chien": 40,
            "chevaux": 30,
            "manger": 25,
            "souris": 20,
            "maison": 15,
        }
    )


@pytest.fixture
def resources(stopwords, lemmas, dictionary):
    """Lexical resources shared by ingestion and search tests."""
    return LexicalResources(stopwords=stopwords, lemmas=lemmas, dictionary=dictionary)


@pytest.fixture
def repository():
    return InMemoryKeywordRepository()


@pytest.fixture
def fake_uow(repository):
    return FakeUnitOfWork(repository)


@pytest.fixture
def store(tmp_path):
    """Migrated SQLite store in a temporary directory.

    A file is used rather than ``:memory:`` because every unit of work opens
    its own connection.
    """
    sqlite_store = SqliteKeywordStore(tmp_path / "index" / "keywords.db")
    sqlite_store.migrate()
    return sqlite_store
