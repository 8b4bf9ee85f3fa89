"""
mbstub Errors

Exception types raised by the URL parser, stub generator and file store.

Each error extends the builtin that would otherwise be raised for the same
situation, so callers can catch either the specific type or the builtin.
"""

import errno


class InvalidURL(ValueError):
    """URL string could not be parsed, even after adding a scheme."""


class InvalidJSON(ValueError):
    """Response body (or an embedded stub payload) is not valid JSON."""


# Name used by the generator contract for response body failures
InvalidResponseBody = InvalidJSON


class InvalidFilename(ValueError):
    """Filename would resolve outside the stubs directory."""


class StubNotFound(FileNotFoundError):
    """Requested stub file does not exist in the store."""

    def __init__(self, filename: str):
        super().__init__(errno.ENOENT, f"File not found: {filename}", filename)

    def __str__(self):
        return self.strerror
