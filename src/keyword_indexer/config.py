"""Centralized configuration for keyword-indexer using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    All environment variables are validated at startup with proper types.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Storage
    database_path: Path = Field(default=Path("indexer.db"), description="SQLite database holding the index")

    # Lexical resources
    stopwords_path: Path | None = Field(default=None, description="Stopword list, one word per line")
    lemma_table_path: Path | None = Field(
        default=None, description="Lemma table: compiled JSON object or raw pipe-delimited GLÀFF lexicon"
    )
    dictionary_path: Path | None = Field(default=None, description="Spelling frequency dictionary (JSON)")

    # Indexing
    signal_keyword_weight: int = Field(default=2, ge=1, description="Weight of document-declared keywords")
    body_keyword_weight: int = Field(default=1, ge=1, description="Weight of keywords found in the body")
    description_length: int = Field(
        default=120, ge=1, description="Characters of body used when a document declares no description"
    )

    # Spelling
    spelling_max_word_length: int = Field(
        default=24, ge=1, description="Longest word the spelling corrector tries to correct"
    )

    # Logging / tracing
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
    service_name: str = Field(default="keyword-indexer", description="Service name reported to tracing")

    @model_validator(mode="after")
    def _check_resources(self) -> "Settings":
        for name in ("stopwords_path", "lemma_table_path", "dictionary_path"):
            path = getattr(self, name)
            if path is not None and not path.is_file():
                raise ValueError(f"{name.upper()} points to {path}, which is not a readable file")
        if self.signal_keyword_weight < self.body_keyword_weight:
            raise ValueError("SIGNAL_KEYWORD_WEIGHT must be greater than or equal to BODY_KEYWORD_WEIGHT")
        return self
