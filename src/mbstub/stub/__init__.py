"""
mbstub Stub Module

Form data models, stub generation and template rendering.
"""

from .models import (
    QueryParam,
    Header,
    StubDraft,
    StubFormData,
    ParseURLRequest,
    StoredFile,
    HTTP_METHODS
)
from .generator import StubGenerator, generate_stub, DEFAULT_RESPONSE_HEADERS
from .renderer import render_template, render_entry, extract_stubs

__all__ = [
    # Models
    'QueryParam',
    'Header',
    'StubDraft',
    'StubFormData',
    'ParseURLRequest',
    'StoredFile',
    'HTTP_METHODS',

    # Generator
    'StubGenerator',
    'generate_stub',
    'DEFAULT_RESPONSE_HEADERS',

    # Renderer
    'render_template',
    'render_entry',
    'extract_stubs',
]
