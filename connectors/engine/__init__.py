"""
Types exchanged with the host query engine.
"""

from .expressions import (
    Operator, Field, Conjunction, Disjunction, Negation, Comparison, Other, Expression,
    compare, all_of, any_of, evaluate
)
from .context import QueryHints, DataSourceObserver, LoggingObserver, RuntimeContext
from .resolver import Column, ColumnMap, EntityResolver
from .chunks import ChunkChannel, RowSource

__all__ = [
    'Operator',
    'Field',
    'Conjunction',
    'Disjunction',
    'Negation',
    'Comparison',
    'Other',
    'Expression',
    'compare',
    'all_of',
    'any_of',
    'evaluate',
    'QueryHints',
    'DataSourceObserver',
    'LoggingObserver',
    'RuntimeContext',
    'Column',
    'ColumnMap',
    'EntityResolver',
    'ChunkChannel',
    'RowSource',
]
