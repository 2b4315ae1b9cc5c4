"""
Table sources for the remote systems.
"""

from .base import PagedRowSource, ListRowSource

__all__ = ['PagedRowSource', 'ListRowSource']
