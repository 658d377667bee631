"""
Unit tests for the abbreviation matcher.
"""

import pytest

from close_enough.matcher import matches, same_char, skip_word


class TestSameChar:
    """Test cases for case-insensitive character comparison."""

    def test_same_letter_different_case(self):
        assert same_char('A', 'a')
        assert same_char('q', 'Q')

    def test_different_letters(self):
        assert not same_char('a', 'b')

    def test_punctuation_compares_literally(self):
        assert same_char('_', '_')
        assert not same_char('_', '-')


class TestSkipWord:
    """Test cases for word boundary skipping."""

    def test_stops_at_non_alphanumeric(self):
        assert skip_word("hello world", 0) == 5

    def test_stops_at_uppercase(self):
        assert skip_word("helloWorld", 1) == 5

    def test_stays_on_boundary(self):
        """A cursor already on a boundary does not move."""
        assert skip_word("hello-world", 5) == 5
        assert skip_word("helloWorld", 5) == 5

    def test_runs_to_end(self):
        assert skip_word("abc", 1) == 3
        assert skip_word("abc", 3) == 3


class TestMatches:
    """Test cases for matches()."""

    def test_empty_query_always_matches(self):
        for candidate in ["", "anything", "A very_big-longMatch"]:
            assert matches(candidate, "")

    def test_empty_candidate_fails_non_empty_query(self):
        assert not matches("", "a")

    def test_exact_match(self):
        assert matches("only", "only")

    def test_prefix_match(self):
        assert matches("only", "on")

    def test_case_insensitive(self):
        assert matches("OnLy", "only")
        assert matches("only", "ONLY")

    def test_can_match_from_beyond_start(self):
        assert matches("theonlyitem", "only")

    def test_failed_match_looks_to_next_word(self):
        assert matches("A very_big-longMatch", "avblm")

    def test_failed_match_does_not_look_within_same_word(self):
        assert not matches("averybiglongmatch", "avblm")

    def test_camel_case_words(self):
        assert matches("fooBarBaz", "fbb")
        assert not matches("foobarbaz", "fbb")

    def test_initials_across_spaces(self):
        assert matches("one two", "owo")

    def test_order_matters(self):
        assert not matches("abc", "cba")

    def test_missing_character_breaks_match(self):
        assert not matches("item_the_first", "item_the_fist")

    @pytest.mark.parametrize("candidate,query", [
        ("src", "s"),
        ("alpha_beta", "ab"),
        ("my-project", "mp"),
        ("README.md", "rmd"),
    ])
    def test_abbreviations(self, candidate, query):
        assert matches(candidate, query)
