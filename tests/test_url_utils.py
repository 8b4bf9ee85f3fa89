"""
Tests for mbstub URL utilities

Tests parse_url() scheme normalization, path extraction and ordered query
parameter extraction.
"""

import pytest

from mbstub.common.url_utils import parse_url, normalize_url, ParsedURL
from mbstub.errors import InvalidURL


class TestNormalizeUrl:
    """Test scheme normalization."""

    def test_adds_https_scheme(self):
        """Test that a missing scheme becomes https://."""
        assert normalize_url('api.example.com/users') == 'https://api.example.com/users'

    def test_keeps_http_scheme(self):
        """Test that an explicit http:// scheme is preserved."""
        assert normalize_url('http://localhost:8080/x') == 'http://localhost:8080/x'

    def test_strips_surrounding_whitespace(self):
        """Test that pasted whitespace is trimmed."""
        assert normalize_url('  api.example.com  ') == 'https://api.example.com'


class TestParseUrl:
    """Test parse_url()."""

    def test_host_without_scheme(self):
        """Test the documented example without a scheme."""
        parsed = parse_url('api.example.com/users?id=1')

        assert parsed.path == '/users'
        assert len(parsed.query_params) == 1
        assert parsed.query_params[0].key == 'id'
        assert parsed.query_params[0].value == '1'

    def test_full_url(self):
        """Test a URL with scheme, port and nested path."""
        parsed = parse_url('http://localhost:4545/api/v1/orders?status=open&page=2')

        assert parsed.path == '/api/v1/orders'
        assert [(p.key, p.value) for p in parsed.query_params] == [
            ('status', 'open'),
            ('page', '2')
        ]

    def test_duplicate_keys_preserved_in_order(self):
        """Test that duplicate query keys stay separate entries."""
        parsed = parse_url('api.example.com/search?tag=a&q=x&tag=b')

        assert [(p.key, p.value) for p in parsed.query_params] == [
            ('tag', 'a'),
            ('q', 'x'),
            ('tag', 'b')
        ]

    def test_blank_values_kept(self):
        """Test that parameters without a value are kept."""
        parsed = parse_url('api.example.com/items?filter=&sort=asc')

        assert [(p.key, p.value) for p in parsed.query_params] == [
            ('filter', ''),
            ('sort', 'asc')
        ]

    def test_encoded_values_decoded(self):
        """Test that percent-encoded values are decoded."""
        parsed = parse_url('api.example.com/search?q=hello%20world')

        assert parsed.query_params[0].value == 'hello world'

    def test_space_in_query(self):
        """Test that an unencoded space in a query value is accepted."""
        parsed = parse_url('api.example.com/search?q=hello world')

        assert parsed.path == '/search'
        assert [(p.key, p.value) for p in parsed.query_params] == [('q', 'hello world')]

    def test_space_in_path_encoded(self):
        """Test that spaces in the path are percent-encoded."""
        parsed = parse_url('api.example.com/my files/report')

        assert parsed.path == '/my%20files/report'

    def test_encoded_path_kept(self):
        """Test that an already-encoded path is not encoded twice."""
        assert parse_url('api.example.com/a%20b/c:d').path == '/a%20b/c:d'

    def test_no_path_defaults_to_root(self):
        """Test that a bare host yields path '/'."""
        parsed = parse_url('api.example.com')

        assert parsed.path == '/'
        assert parsed.query_params == []

    def test_fragment_ignored(self):
        """Test that fragments are not part of path or query."""
        parsed = parse_url('api.example.com/docs?v=1#section')

        assert parsed.path == '/docs'
        assert [(p.key, p.value) for p in parsed.query_params] == [('v', '1')]

    def test_to_dict(self):
        """Test conversion to the API shape."""
        data = parse_url('api.example.com/users?id=1').to_dict()

        assert data == {
            'path': '/users',
            'queryParams': [{'key': 'id', 'value': '1'}]
        }

    def test_returns_parsed_url(self):
        """Test return type."""
        assert isinstance(parse_url('example.com'), ParsedURL)


class TestParseUrlErrors:
    """Test InvalidURL failures."""

    def test_not_a_url(self):
        """Test that free text is rejected."""
        with pytest.raises(InvalidURL):
            parse_url('not a url')

    def test_space_in_host(self):
        """Test that whitespace inside the host is rejected."""
        with pytest.raises(InvalidURL):
            parse_url('api example.com/users')

    def test_empty_string(self):
        """Test that an empty string is rejected."""
        with pytest.raises(InvalidURL):
            parse_url('')

    def test_scheme_only(self):
        """Test that a URL without host is rejected."""
        with pytest.raises(InvalidURL):
            parse_url('https://')

    def test_invalid_port(self):
        """Test that an out-of-range port is rejected."""
        with pytest.raises(InvalidURL):
            parse_url('api.example.com:99999/users')

    def test_invalid_url_is_value_error(self):
        """Test that InvalidURL can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_url('not a url')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
