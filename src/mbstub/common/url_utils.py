"""
mbstub URL Utilities

Turns a free-form URL typed into the form into a path and an ordered list of
query parameters.
"""

from urllib.parse import urlparse, parse_qsl, quote
from dataclasses import dataclass, field
from typing import List, Dict, Any

from ..errors import InvalidURL
from ..stub.models import QueryParam


DEFAULT_SCHEME = 'https://'

# Characters left as-is when percent-encoding the path
PATH_SAFE_CHARS = "/%:@!$&'()*+,;="


@dataclass
class ParsedURL:
    """Path and query parameters extracted from a URL."""

    path: str
    query_params: List[QueryParam] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape used by the API."""
        return {
            'path': self.path,
            'queryParams': [p.model_dump() for p in self.query_params]
        }


def normalize_url(url: str) -> str:
    """
    Prepend the default scheme when the URL has none.

    Args:
        url: URL as typed by the user

    Returns:
        URL starting with http:// or https://
    """
    url = url.strip()
    if not url.startswith(('http://', 'https://')):
        url = DEFAULT_SCHEME + url
    return url


def parse_url(url: str) -> ParsedURL:
    """
    Extract path and query parameters from a URL.

    Duplicate query keys are kept as separate entries in encounter order.

    Args:
        url: URL with or without scheme (e.g. "api.example.com/users?id=1")

    Returns:
        ParsedURL with path and ordered query parameters

    Raises:
        InvalidURL: If the string cannot be parsed as a URL

    Example:
        parsed = parse_url("api.example.com/users?id=1")
        parsed.path          # "/users"
        parsed.query_params  # [QueryParam(key="id", value="1")]
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURL("Invalid URL format")

    normalized = normalize_url(url)

    try:
        parsed = urlparse(normalized)
        # Accessing .port validates it (raises ValueError when out of range)
        parsed.port
    except ValueError as e:
        raise InvalidURL("Invalid URL format") from e

    # Whitespace is only fatal in the host; "not a url" must not slip through
    if not parsed.hostname or any(ch.isspace() for ch in parsed.netloc):
        raise InvalidURL("Invalid URL format")

    query_params = [
        QueryParam(key=key, value=value)
        for key, value in parse_qsl(parsed.query, keep_blank_values=True)
    ]

    path = quote(parsed.path, safe=PATH_SAFE_CHARS) or '/'
    return ParsedURL(path=path, query_params=query_params)
