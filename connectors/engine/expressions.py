"""
Filter expression tree handed over by the host query engine.

The tree is a closed set of node types: Conjunction, Disjunction, Negation,
Comparison and Other. Consumers dispatch on the node type; there is no
behaviour on the nodes themselves.

evaluate() is the host-side re-check that runs against every fetched row.
Pushdown only narrows what is fetched, the original tree always decides.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional, Union

from dateutil import parser as date_parser


class Operator(str, Enum):
    """Comparison operators understood by the host engine."""

    EQ = "="
    NE = "<>"
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    LIKE = "like"
    CONTAINS = "contains"


# Operator to use when the literal and the field swap sides
_MIRRORED = {
    Operator.EQ: Operator.EQ,
    Operator.NE: Operator.NE,
    Operator.GT: Operator.LT,
    Operator.GE: Operator.LE,
    Operator.LT: Operator.GT,
    Operator.LE: Operator.GE,
}


@dataclass(frozen=True)
class Field:
    """Column reference, only used to build comparisons."""

    name: str


@dataclass(frozen=True)
class Conjunction:
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class Disjunction:
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class Negation:
    operand: "Expression"


@dataclass(frozen=True)
class Comparison:
    field: str
    operator: Operator
    literal: Any


@dataclass(frozen=True)
class Other:
    """Any node the connectors cannot interpret (function calls, IN lists, ...)."""

    description: str = ""
    predicate: Optional[Callable[[Any], bool]] = None


Expression = Union[Conjunction, Disjunction, Negation, Comparison, Other]


def compare(left: Any, operator: Union[Operator, str], right: Any) -> Expression:
    """
    Build a comparison with the field on the left-hand side.

    ``compare("Open", "=", Field("Status"))`` becomes ``Status = 'Open'``;
    ordering operators are mirrored. Field-to-field and literal-to-literal
    comparisons have no pushdown meaning and become Other.
    """
    operator = Operator(operator)

    if isinstance(left, Field) and not isinstance(right, Field):
        return Comparison(left.name, operator, right)

    if isinstance(right, Field) and not isinstance(left, Field) and operator in _MIRRORED:
        return Comparison(right.name, _MIRRORED[operator], left)

    return Other(f"{left!r} {operator.value} {right!r}")


def all_of(*nodes: Expression) -> Expression:
    """Fold nodes into a left-deep AND chain."""
    if not nodes:
        raise ValueError("all_of() needs at least one expression")
    result = nodes[0]
    for node in nodes[1:]:
        result = Conjunction(result, node)
    return result


def any_of(*nodes: Expression) -> Expression:
    """Fold nodes into a left-deep OR chain."""
    if not nodes:
        raise ValueError("any_of() needs at least one expression")
    result = nodes[0]
    for node in nodes[1:]:
        result = Disjunction(result, node)
    return result


def evaluate(expression: Optional[Expression], row: Any) -> bool:
    """
    Evaluate an expression against one row.

    Args:
        expression: Filter tree, None means no filter
        row: Anything supporting ``row[column_name]`` (an EntityResolver, a dict)

    Returns:
        True when the row satisfies the expression
    """
    if expression is None:
        return True

    if isinstance(expression, Conjunction):
        return evaluate(expression.left, row) and evaluate(expression.right, row)

    if isinstance(expression, Disjunction):
        return evaluate(expression.left, row) or evaluate(expression.right, row)

    if isinstance(expression, Negation):
        return not evaluate(expression.operand, row)

    if isinstance(expression, Comparison):
        return _evaluate_comparison(expression, _lookup(row, expression.field))

    if isinstance(expression, Other):
        return expression.predicate(row) if expression.predicate else True

    raise TypeError(f"Unsupported expression node: {type(expression).__name__}")


def _lookup(row: Any, name: str) -> Any:
    try:
        return row[name]
    except KeyError:
        if isinstance(row, dict):
            lowered = {key.lower(): value for key, value in row.items()}
            if name.lower() in lowered:
                return lowered[name.lower()]
        raise


def _evaluate_comparison(comparison: Comparison, value: Any) -> bool:
    literal = comparison.literal
    operator = comparison.operator

    # SQL semantics: NULL never satisfies a comparison
    if value is None or literal is None:
        return False

    if operator is Operator.LIKE:
        return _like_to_regex(str(literal)).fullmatch(str(value)) is not None

    if operator is Operator.CONTAINS:
        if isinstance(value, (list, tuple)):
            return literal in value
        return str(literal) in str(value)

    value, literal = _coerce_pair(value, literal)

    try:
        if operator is Operator.EQ:
            return value == literal
        if operator is Operator.NE:
            return value != literal
        if operator is Operator.GT:
            return value > literal
        if operator is Operator.GE:
            return value >= literal
        if operator is Operator.LT:
            return value < literal
        if operator is Operator.LE:
            return value <= literal
    except TypeError:
        return False

    raise ValueError(f"Unsupported operator: {operator}")


def _coerce_pair(value: Any, literal: Any):
    """Line up datetimes with dates and ISO strings so they compare."""
    if isinstance(value, datetime) or isinstance(literal, datetime):
        return _as_aware_datetime(value), _as_aware_datetime(literal)
    if isinstance(value, date) and isinstance(literal, str):
        try:
            return value, date_parser.isoparse(literal).date()
        except ValueError:
            return value, literal
    return value, literal


def _as_aware_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            value = date_parser.isoparse(value)
        except ValueError:
            return value
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _like_to_regex(pattern: str):
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)
