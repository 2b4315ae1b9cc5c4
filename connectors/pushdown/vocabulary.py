"""
Filter vocabularies.

A vocabulary is a dataclass of optional fields, one per remote filter the
source understands, plus a ``FIELDS`` table mapping lower-cased column names
to FilterField descriptors. The extractor fills an instance; the remote query
builder reads it.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, FrozenSet, Optional

from dateutil import parser as date_parser

from connectors.engine.expressions import Operator


class FieldKind(Enum):
    """How a recognised comparison is recorded into the vocabulary."""

    SCALAR = "scalar"   # last write wins
    LIST = "list"       # every value appended, "has all of"
    TEXT = "text"       # contains/like search text
    RANGE = "range"     # lower/upper bound pair
    FLAG = "flag"       # boolean


_DEFAULT_OPERATORS = {
    FieldKind.SCALAR: frozenset({Operator.EQ}),
    FieldKind.LIST: frozenset({Operator.EQ, Operator.CONTAINS}),
    FieldKind.TEXT: frozenset({Operator.LIKE, Operator.CONTAINS}),
    FieldKind.RANGE: frozenset({Operator.GT, Operator.GE, Operator.LT, Operator.LE}),
    FieldKind.FLAG: frozenset({Operator.EQ}),
}


class UnconvertibleLiteral(ValueError):
    """Raised by a converter when a literal cannot be used for pushdown."""
    pass


def as_text(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        raise UnconvertibleLiteral(f"Not a text literal: {value!r}")
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    raise UnconvertibleLiteral(f"Not a text literal: {value!r}")


def as_datetime(value: Any) -> datetime:
    """datetime, date or ISO-8601 string; naive values are taken as UTC."""
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            result = date_parser.isoparse(value.strip())
        except ValueError as e:
            raise UnconvertibleLiteral(f"Not a date literal: {value!r}") from e
    else:
        raise UnconvertibleLiteral(f"Not a date literal: {value!r}")

    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise UnconvertibleLiteral(f"Not a boolean literal: {value!r}")


def as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise UnconvertibleLiteral(f"Not an integer literal: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise UnconvertibleLiteral(f"Not an integer literal: {value!r}")


@dataclass(frozen=True)
class FilterField:
    """
    Describes how one column maps onto a vocabulary attribute.

    Args:
        attribute: Vocabulary attribute written to (lower bound for RANGE)
        kind: Recording behaviour
        convert: Literal converter, raising UnconvertibleLiteral to skip
        operators: Operators accepted, defaults depend on ``kind``
        upper_attribute: Upper bound attribute for RANGE fields, None when
            the remote side only supports a lower bound
    """

    attribute: str
    kind: FieldKind = FieldKind.SCALAR
    convert: Callable[[Any], Any] = as_text
    operators: Optional[FrozenSet[Operator]] = None
    upper_attribute: Optional[str] = None

    def accepts(self, operator: Operator) -> bool:
        allowed = self.operators if self.operators is not None else _DEFAULT_OPERATORS[self.kind]
        if operator not in allowed:
            return False
        if self.kind is FieldKind.RANGE and operator in (Operator.LT, Operator.LE):
            return self.upper_attribute is not None
        return True


def text_field(attribute: str) -> FilterField:
    return FilterField(attribute)


def list_field(attribute: str) -> FilterField:
    return FilterField(attribute, FieldKind.LIST)


def search_field(attribute: str) -> FilterField:
    return FilterField(attribute, FieldKind.TEXT)


def range_field(lower: str, upper: Optional[str] = None) -> FilterField:
    return FilterField(lower, FieldKind.RANGE, as_datetime, upper_attribute=upper)


def flag_field(attribute: str) -> FilterField:
    return FilterField(attribute, FieldKind.FLAG, as_bool)


def int_field(attribute: str) -> FilterField:
    return FilterField(attribute, convert=as_int)
