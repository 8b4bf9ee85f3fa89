"""
mbstub Server Module

HTTP API and form UI for building Mountebank stubs.

This module provides:
- FastAPI-based stub server
- Configuration from YAML files and environment variables
"""

from .config import ServerConfig
from .app import StubServer, create_stub_server, format_validation_errors

__all__ = [
    'ServerConfig',
    'StubServer',
    'create_stub_server',
    'format_validation_errors',
]
