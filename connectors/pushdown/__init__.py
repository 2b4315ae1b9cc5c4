"""
Predicate pushdown: vocabularies, extraction and the paginated fetch loop.
"""

from .vocabulary import (
    FieldKind, FilterField, UnconvertibleLiteral,
    as_text, as_datetime, as_bool, as_int,
    text_field, list_field, search_field, range_field, flag_field, int_field
)
from .extractor import extract_filters
from .paginator import FetchState, FetchCursor, PageFetcher, enrich_each

__all__ = [
    'FieldKind',
    'FilterField',
    'UnconvertibleLiteral',
    'as_text',
    'as_datetime',
    'as_bool',
    'as_int',
    'text_field',
    'list_field',
    'search_field',
    'range_field',
    'flag_field',
    'int_field',
    'extract_filters',
    'FetchState',
    'FetchCursor',
    'PageFetcher',
    'enrich_each',
]
