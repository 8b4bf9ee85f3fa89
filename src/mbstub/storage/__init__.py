"""
mbstub Storage Module

File-backed storage for rendered stub templates.
"""

from .file_store import FileStore

__all__ = ['FileStore']
