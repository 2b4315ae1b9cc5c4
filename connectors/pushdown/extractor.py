"""
Predicate extractor.

Walks a filter tree and records the comparisons a vocabulary can push to the
remote side. Only AND chains are followed: anything under an OR or a NOT, any
unknown column, unsupported operator or unusable literal is left alone and
stays the host's job. Extraction never raises.
"""

from typing import Dict, Optional, Type, TypeVar

from connectors.core.logging_config import get_logger
from connectors.engine.expressions import Comparison, Conjunction, Expression, Operator
from connectors.pushdown.vocabulary import FieldKind, FilterField, UnconvertibleLiteral, as_text

logger = get_logger(__name__)

V = TypeVar("V")

_LIKE_WILDCARDS = "%_"


def extract_filters(expression: Optional[Expression], vocabulary_cls: Type[V]) -> V:
    """
    Populate a fresh vocabulary instance from a filter tree.

    Args:
        expression: The host's filter tree, None when the query is unfiltered
        vocabulary_cls: Vocabulary dataclass exposing a ``FIELDS`` table

    Returns:
        The populated vocabulary; fields not provably pushable stay unset
    """
    parameters = vocabulary_cls()
    if expression is not None:
        _extract(expression, parameters, vocabulary_cls.FIELDS)
    return parameters


def _extract(node: Expression, parameters, fields: Dict[str, FilterField]):
    if isinstance(node, Conjunction):
        _extract(node.left, parameters, fields)
        _extract(node.right, parameters, fields)
        return

    if isinstance(node, Comparison):
        _record(node, parameters, fields)
        return

    logger.debug(f"Not pushing down {type(node).__name__} node")


def _record(comparison: Comparison, parameters, fields: Dict[str, FilterField]):
    field = fields.get(comparison.field.lower())
    if field is None:
        logger.debug(f"Column '{comparison.field}' has no remote filter")
        return

    if not field.accepts(comparison.operator):
        logger.debug(f"Operator '{comparison.operator.value}' not pushed for column '{comparison.field}'")
        return

    try:
        if field.kind is FieldKind.LIST:
            _append_values(field, comparison, parameters)
        elif field.kind is FieldKind.TEXT:
            setattr(parameters, field.attribute, _search_text(comparison))
        elif field.kind is FieldKind.RANGE:
            value = field.convert(comparison.literal)
            if comparison.operator in (Operator.GT, Operator.GE):
                setattr(parameters, field.attribute, value)
            else:
                setattr(parameters, field.upper_attribute, value)
        else:
            setattr(parameters, field.attribute, field.convert(comparison.literal))
    except UnconvertibleLiteral as e:
        logger.debug(f"Not pushing down {comparison.field}: {e}")


def _append_values(field: FilterField, comparison: Comparison, parameters):
    values = getattr(parameters, field.attribute)
    if comparison.operator is Operator.EQ and isinstance(comparison.literal, str):
        parts = [part.strip() for part in comparison.literal.split(",") if part.strip()]
        if not parts:
            raise UnconvertibleLiteral(f"Empty list literal: {comparison.literal!r}")
        values.extend(parts)
    else:
        values.append(field.convert(comparison.literal))


def _search_text(comparison: Comparison) -> str:
    """Search text for a contains/like comparison."""
    if comparison.operator is Operator.CONTAINS:
        return as_text(comparison.literal)

    if not isinstance(comparison.literal, str):
        raise UnconvertibleLiteral(f"LIKE pattern must be a string: {comparison.literal!r}")

    text = comparison.literal.strip(_LIKE_WILDCARDS)
    if not text.strip():
        raise UnconvertibleLiteral(f"LIKE pattern has no search text: {comparison.literal!r}")
    if any(wildcard in text for wildcard in _LIKE_WILDCARDS):
        raise UnconvertibleLiteral(f"LIKE pattern has inner wildcards: {comparison.literal!r}")
    return text
