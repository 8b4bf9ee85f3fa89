"""
mbstub - Mountebank stub builder

Turns a request/response description (method, path, query parameters,
headers, status code, JSON body) into a Mountebank stub rendered as an EJS
template, and stores those templates on disk.
"""

from .stub import StubDraft, StubFormData, StubGenerator, generate_stub, render_template, extract_stubs
from .common import parse_url
from .storage import FileStore

__all__ = [
    'StubDraft',
    'StubFormData',
    'StubGenerator',
    'generate_stub',
    'render_template',
    'extract_stubs',
    'parse_url',
    'FileStore',
]

__version__ = '1.0.0'
