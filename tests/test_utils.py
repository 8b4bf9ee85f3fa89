"""
Tests for mbstub common utility functions.

Tests parse_json_body(), fold_pairs() and ensure_extension().
"""

import pytest

from mbstub.common.utils import parse_json_body, fold_pairs, ensure_extension, EMPTY_BODY
from mbstub.errors import InvalidJSON, InvalidResponseBody


class TestParseJsonBody:
    """Test suite for parse_json_body() function."""

    def test_object(self):
        """Test parsing a JSON object."""
        assert parse_json_body('{"x": 1}') == {'x': 1}

    def test_scalar(self):
        """Test parsing a JSON scalar."""
        assert parse_json_body('42') == 42
        assert parse_json_body('"text"') == 'text'

    def test_null_is_not_blank(self):
        """Test that a literal null parses to None rather than the sentinel."""
        assert parse_json_body('null') is None

    @pytest.mark.parametrize('text', ['', '   ', '\n\t', None])
    def test_blank(self, text):
        """Test that blank input returns the empty sentinel."""
        assert parse_json_body(text) == EMPTY_BODY

    @pytest.mark.parametrize('text', ['{bad json', "{'single': 1}", '[1, 2', 'undefined'])
    def test_invalid(self, text):
        """Test that malformed JSON raises InvalidJSON."""
        with pytest.raises(InvalidJSON):
            parse_json_body(text)

    @pytest.mark.parametrize('text', ['NaN', 'Infinity', '-Infinity', '{"x": NaN}', '[1, Infinity]'])
    def test_non_finite_constants(self, text):
        """Test that NaN and Infinity literals are not accepted as JSON."""
        with pytest.raises(InvalidJSON):
            parse_json_body(text)

    def test_invalid_response_body_alias(self):
        """Test that the generator-facing name refers to the same error."""
        assert InvalidResponseBody is InvalidJSON


class TestFoldPairs:
    """Test suite for fold_pairs() function."""

    def test_last_wins(self):
        """Test that later duplicates overwrite earlier values."""
        assert fold_pairs([('a', '1'), ('b', '2'), ('a', '3')]) == {'a': '3', 'b': '2'}

    def test_first_position_kept(self):
        """Test that overwritten keys keep their original position."""
        assert list(fold_pairs([('a', '1'), ('b', '2'), ('a', '3')])) == ['a', 'b']

    def test_empty_keys_skipped(self):
        """Test that empty keys are dropped."""
        assert fold_pairs([('', 'x'), ('k', '')]) == {'k': ''}

    def test_empty_input(self):
        """Test folding nothing."""
        assert fold_pairs([]) == {}


class TestEnsureExtension:
    """Test suite for ensure_extension() function."""

    def test_adds_extension(self):
        assert ensure_extension('users') == 'users.ejs'

    def test_keeps_extension(self):
        assert ensure_extension('users.ejs') == 'users.ejs'

    def test_custom_extension(self):
        assert ensure_extension('users', '.json') == 'users.json'
