"""
mbstub Common Utilities

Shared utilities and helpers used across mbstub modules.
"""

from .utils import parse_json_body, fold_pairs, ensure_extension, EMPTY_BODY
from .url_utils import parse_url, normalize_url, ParsedURL

__all__ = [
    'parse_json_body',
    'fold_pairs',
    'ensure_extension',
    'EMPTY_BODY',
    'parse_url',
    'normalize_url',
    'ParsedURL'
]
