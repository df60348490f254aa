"""Unit tests for edit-distance spelling correction."""

import doctest

import pytest

from keyword_indexer.search import fuzzy
from keyword_indexer.search.fuzzy import ALPHABET, SpellingCorrector, best_candidate, correct, edit_variants
from keyword_indexer.search.lexicon import FrequencyDictionary


@pytest.mark.unit
class TestEditVariants:
    """Tests for distance-1 variant generation."""

    def test_variant_count(self):
        # Two splits, each with a deletion and an alteration and insertion per
        # letter; only the first split has a transposition.
        assert len(edit_variants("ab")) == 2 * (1 + 2 * len(ALPHABET)) + 1

    def test_contains_each_edit_kind(self):
        variants = edit_variants("chat")

        assert "hat" in variants  # deletion
        assert "hcat" in variants  # transposition
        assert "chut" in variants  # alteration
        assert "chèat" in variants  # insertion

    def test_accented_letters_are_candidates(self):
        assert "éte" in edit_variants("ete")

    def test_no_insertion_after_last_character(self):
        assert "abc" not in edit_variants("ab")

    def test_empty_word(self):
        assert edit_variants("") == []

    def test_docstring_examples(self):
        assert doctest.testmod(fuzzy).failed == 0


@pytest.mark.unit
class TestBestCandidate:
    """Tests for frequency-ranked candidate selection."""

    def test_highest_frequency_wins(self):
        assert best_candidate(["chat", "chien"], {"chat": 1, "chien": 5}) == "chien"

    def test_ties_go_to_smallest_word(self):
        assert best_candidate(["b", "a"], {"a": 1, "b": 1}) == "a"
        assert best_candidate(["a", "b"], {"a": 1, "b": 1}) == "a"

    def test_unknown_candidates(self):
        assert best_candidate(["x"], {"y": 1}) is None
        assert best_candidate([], {}) is None

    def test_zero_frequency_is_still_a_candidate(self):
        assert best_candidate(["chat"], {"chat": 0}) == "chat"


@pytest.mark.unit
class TestCorrect:
    """Tests for the correction algorithm."""

    def test_known_word_is_unchanged(self, dictionary):
        assert correct("chat", dictionary) == "chat"

    def test_transposition(self, dictionary):
        assert correct("chta", dictionary) == "chat"
        assert correct("chein", dictionary) == "chien"

    def test_distance_one_beats_more_frequent_distance_two(self):
        assert correct("chit", {"chat": 1, "chien": 1000}) == "chat"

    def test_single_alteration_preferred(self):
        assert correct("chwt", {"chat": 10, "chats": 1}) == "chat"

    def test_distance_two(self):
        assert correct("maisonxx", {"maison": 5}) == "maison"

    def test_no_candidate_returns_word(self, dictionary):
        assert correct("zzzzzz", dictionary) == "zzzzzz"

    def test_frequency_tie_goes_to_smallest_word(self):
        assert correct("chaz", {"chat": 10, "chas": 10}) == "chas"

    def test_without_dictionary(self):
        assert correct("chta") == "chta"

    def test_plain_mapping_dictionary(self):
        assert correct("chta", {"chat": 1}) == "chat"

    def test_words_longer_than_limit_are_not_corrected(self, dictionary):
        assert correct("chta", dictionary, max_length=3) == "chta"
        assert correct("chta", dictionary, max_length=4) == "chat"

    def test_correction_is_deterministic(self, dictionary):
        assert {correct("chta", dictionary) for _ in range(5)} == {"chat"}


@pytest.mark.unit
class TestSpellingCorrector:
    """Tests for the corrector value object."""

    def test_enabled_with_dictionary(self, dictionary):
        corrector = SpellingCorrector(dictionary)

        assert corrector.enabled
        assert corrector.correct("chta") == "chat"

    def test_disabled_without_dictionary(self):
        corrector = SpellingCorrector()

        assert not corrector.enabled
        assert corrector.correct("chta") == "chta"

    def test_length_limit(self):
        corrector = SpellingCorrector(FrequencyDictionary({"chat": 1}), max_length=3)

        assert corrector.correct("chta") == "chta"
