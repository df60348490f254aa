"""Unit tests for Settings."""

from pathlib import Path

from pydantic import ValidationError
import pytest

from keyword_indexer.config import Settings


@pytest.mark.unit
class TestSettings:
    """Tests for environment-driven configuration."""

    def test_defaults(self):
        settings = Settings()

        assert settings.database_path == Path("indexer.db")
        assert settings.stopwords_path is None
        assert settings.lemma_table_path is None
        assert settings.dictionary_path is None
        assert settings.signal_keyword_weight == 2
        assert settings.body_keyword_weight == 1
        assert settings.description_length == 120
        assert settings.spelling_max_word_length == 24
        assert settings.log_json is True
        assert settings.service_name == "keyword-indexer"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        stopwords = tmp_path / "stopwords.txt"
        stopwords.write_text("les\n", encoding="utf-8")
        monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "index.db"))
        monkeypatch.setenv("STOPWORDS_PATH", str(stopwords))
        monkeypatch.setenv("SIGNAL_KEYWORD_WEIGHT", "3")
        monkeypatch.setenv("log_json", "false")

        settings = Settings()

        assert settings.database_path == tmp_path / "index.db"
        assert settings.stopwords_path == stopwords
        assert settings.signal_keyword_weight == 3
        assert settings.log_json is False

    def test_missing_resource_file_rejected(self, tmp_path):
        with pytest.raises(ValidationError, match="DICTIONARY_PATH"):
            Settings(dictionary_path=tmp_path / "missing.json")

    def test_signal_weight_below_body_weight_rejected(self):
        with pytest.raises(ValidationError, match="SIGNAL_KEYWORD_WEIGHT"):
            Settings(signal_keyword_weight=1, body_keyword_weight=2)

    @pytest.mark.parametrize("field", ["signal_keyword_weight", "body_keyword_weight", "description_length"])
    def test_non_positive_values_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_unknown_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("UNRELATED_SETTING", "1")

        assert Settings().body_keyword_weight == 1
