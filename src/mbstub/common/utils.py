"""
mbstub Common Utilities

Shared helpers used by the generator, renderer and store.
"""

import json
from typing import Any, Iterable, Dict, Tuple

from ..errors import InvalidJSON


# Sentinel body for a blank responseBody field
EMPTY_BODY = ""


def _reject_constant(name: str):
    # NaN and Infinity are accepted by json.loads but are not JSON
    raise ValueError(f"{name} is not valid JSON")


def parse_json_body(text: str) -> Any:
    """
    Parse a response body typed into the form.

    Unlike a lenient parse, malformed JSON is reported instead of being
    replaced with a fallback value.

    Args:
        text: Raw response body text

    Returns:
        Parsed JSON value, or EMPTY_BODY when the text is blank

    Raises:
        InvalidJSON: If the text is not blank and not valid JSON

    Example:
        parse_json_body('{"x": 1}')  # {'x': 1}
        parse_json_body('   ')       # ''
    """
    if text is None or not text.strip():
        return EMPTY_BODY

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (json.JSONDecodeError, TypeError, ValueError) as e:
        raise InvalidJSON(f"Invalid JSON in response body: {e}") from e


def fold_pairs(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """
    Fold ordered key/value pairs into a dict.

    Entries with an empty key are skipped; later duplicates overwrite
    earlier ones while keeping the first key's position.
    """
    folded: Dict[str, str] = {}
    for key, value in pairs:
        if key:
            folded[key] = value
    return folded


def ensure_extension(filename: str, extension: str = '.ejs') -> str:
    """Append the template extension to a filename when it is missing."""
    if filename.endswith(extension):
        return filename
    return f"{filename}{extension}"
