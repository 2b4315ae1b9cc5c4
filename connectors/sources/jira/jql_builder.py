"""
JQL builder.

Renders a JiraFilterParameters instance, optionally on top of a caller
supplied base JQL, into one JQL string. Clause order is fixed so the same
filters always produce the same query.
"""

import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple

from connectors.sources.jira.filters import JiraFilterParameters

DEFAULT_ORDERING = "order by created DESC"

JQL_DATE_FORMAT = "%Y-%m-%d %H:%M"

# Widest UTC offset in use (Line Islands, UTC+14)
MAX_UTC_OFFSET = timedelta(hours=14)

# Sentinels meaning "no user" for assignee/reporter
EMPTY_USER_VALUES = frozenset({"unassigned", "null"})

_PLAIN_KEY = re.compile(r"^[A-Za-z][A-Za-z0-9_]*(-\d+)?$")
_RESERVED_WORDS = frozenset({"and", "or", "not", "empty", "null", "order", "by", "in", "is", "was", "changed"})
_ORDER_BY = re.compile(r"\border\s+by\b", re.IGNORECASE)
_OR = re.compile(r"\bor\b", re.IGNORECASE)


def escape_jql(value: str) -> str:
    """Backslash-escape backslashes and double quotes."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def quote(value: str) -> str:
    return f'"{escape_jql(value)}"'


def format_date(value: datetime, round_up: bool = False, time_zone: Optional[tzinfo] = None) -> str:
    """
    Render a datetime with minute precision.

    Naive values are taken as UTC. The value is converted to ``time_zone``
    (UTC when None) before rendering. With ``round_up`` a value that has
    seconds is moved to the next minute, so an upper bound never excludes
    rows the original comparison would keep.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(time_zone or timezone.utc)
    if round_up and (value.second or value.microsecond):
        value = _shift(value.replace(second=0, microsecond=0), timedelta(minutes=1))
    return value.strftime(JQL_DATE_FORMAT)


def build_jql(base_jql: Optional[str], parameters: JiraFilterParameters, time_zone: Optional[tzinfo] = None) -> str:
    """
    Build the JQL for an issue fetch.

    Jira reads date literals in the time zone of the searching user. With
    ``time_zone`` known, date bounds are rendered in it. Without it, lower
    bounds move back and upper bounds move forward by the widest UTC offset,
    so whatever the user's zone the pushed window contains the requested one.

    Args:
        base_jql: Optional JQL the filters are added to, e.g. ``project = PROJ``
        parameters: Filters extracted from the query
        time_zone: Time zone of the Jira user running the search, when known

    Returns:
        Clauses joined with `` AND ``; ``order by created DESC`` when there is
        nothing to filter on

    Raises:
        TypeError: When a parameter holds a value of the wrong type
    """
    if not isinstance(parameters, JiraFilterParameters):
        raise TypeError(f"Expected JiraFilterParameters, got {type(parameters).__name__}")

    clauses: List[str] = []
    ordering = None

    if base_jql is not None:
        _check_type("base_jql", base_jql, str)
        condition, ordering = split_ordering(base_jql)
        if condition:
            clauses.append(f"({condition})" if _find_unquoted(_OR, condition) is not None else condition)

    _add_equality(clauses, "status", _text("status", parameters.status))
    _add_equality(clauses, "issuetype", _text("issue_type", parameters.issue_type))
    _add_equality(clauses, "priority", _text("priority", parameters.priority))
    _add_equality(clauses, "resolution", _text("resolution", parameters.resolution))
    _add_user(clauses, "assignee", _text("assignee", parameters.assignee))
    _add_user(clauses, "reporter", _text("reporter", parameters.reporter))
    _add_identifier(clauses, "project", _text("project_key", parameters.project_key))
    _add_identifier(clauses, "key", _text("key", parameters.key))
    _add_identifier(clauses, "parent", _text("parent_key", parameters.parent_key))
    _add_equality(clauses, "fixVersion", _text("fix_version", parameters.fix_version))

    for label in _text_list("labels", parameters.labels):
        clauses.append(f"labels = {quote(label)}")

    for component in _text_list("components", parameters.components):
        clauses.append(f"component = {quote(component)}")

    _add_range(clauses, "created", parameters.created_after, parameters.created_before, time_zone)
    _add_range(clauses, "updated", parameters.updated_after, parameters.updated_before, time_zone)

    summary = _text("summary_contains", parameters.summary_contains)
    if summary:
        clauses.append(f"summary ~ {quote(summary)}")

    text = _text("text_search", parameters.text_search)
    if text:
        clauses.append(f"text ~ {quote(text)}")

    if not clauses:
        return ordering or DEFAULT_ORDERING

    jql = " AND ".join(clauses)
    if ordering:
        jql = f"{jql} {ordering}"
    return jql


def ensure_ordering(jql: str) -> str:
    """Append ``ORDER BY created DESC`` unless the query already orders its results."""
    if not jql or not jql.strip():
        return DEFAULT_ORDERING
    if _find_unquoted(_ORDER_BY, jql) is not None:
        return jql
    return f"{jql} ORDER BY created DESC"


def split_ordering(jql: str) -> Tuple[str, Optional[str]]:
    """Split a JQL string into its condition and its ORDER BY part."""
    match = _find_unquoted(_ORDER_BY, jql)
    if match is None:
        return jql.strip(), None
    return jql[:match.start()].strip(), jql[match.start():].strip()


def _find_unquoted(pattern: re.Pattern, jql: str) -> Optional[re.Match]:
    """First match of ``pattern`` that is not inside a double-quoted string."""
    for match in pattern.finditer(jql):
        if not _inside_quotes(jql, match.start()):
            return match
    return None


def _inside_quotes(jql: str, position: int) -> bool:
    inside = False
    escaped = False
    for char in jql[:position]:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            inside = not inside
    return inside


def _check_type(name: str, value, expected: type):
    if not isinstance(value, expected):
        raise TypeError(f"{name} must be {expected.__name__}, got {type(value).__name__}")


def _text(name: str, value) -> Optional[str]:
    if value is None:
        return None
    _check_type(name, value, str)
    return value


def _text_list(name: str, values) -> List[str]:
    _check_type(name, values, list)
    for value in values:
        _check_type(f"{name} item", value, str)
    return [value for value in values if value]


def _add_equality(clauses: List[str], jql_field: str, value: Optional[str]):
    if value:
        clauses.append(f"{jql_field} = {quote(value)}")


def _add_user(clauses: List[str], jql_field: str, value: Optional[str]):
    if not value:
        return
    if value.lower() in EMPTY_USER_VALUES:
        clauses.append(f"{jql_field} is EMPTY")
    else:
        clauses.append(f"{jql_field} = {quote(value)}")


def _add_identifier(clauses: List[str], jql_field: str, value: Optional[str]):
    if not value:
        return
    if _PLAIN_KEY.match(value) and value.lower() not in _RESERVED_WORDS:
        clauses.append(f"{jql_field} = {value}")
    else:
        clauses.append(f"{jql_field} = {quote(value)}")


def _add_range(clauses: List[str], jql_field: str, lower: Optional[datetime], upper: Optional[datetime],
               time_zone: Optional[tzinfo]):
    margin = timedelta(0) if time_zone is not None else MAX_UTC_OFFSET
    if lower is not None:
        _check_type(f"{jql_field} lower bound", lower, datetime)
        clauses.append(f'{jql_field} >= "{format_date(_shift(lower, -margin), time_zone=time_zone)}"')
    if upper is not None:
        _check_type(f"{jql_field} upper bound", upper, datetime)
        clauses.append(f'{jql_field} <= "{format_date(_shift(upper, margin), round_up=True, time_zone=time_zone)}"')


def _shift(value: datetime, delta: timedelta) -> datetime:
    try:
        return value + delta
    except OverflowError:
        # Already at the edge of the datetime range
        return value
