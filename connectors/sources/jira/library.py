"""
Helper functions the host can call on Jira rows.

They take the issue entity behind a row (``row.entity``) or plain values, and
are exposed to the host under their query names through FUNCTIONS.
"""

from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional

from connectors.sources.jira.entities import JiraIssue

CUSTOM_FIELD_PREFIX = "customfield_"


def _contains(values: Iterable[str], wanted: str) -> bool:
    wanted = wanted.lower()
    return any(value.lower() == wanted for value in values)


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def has_label(issue: JiraIssue, label: str) -> bool:
    """Case-insensitive label membership."""
    return _contains(issue.labels, label)


def has_component(issue: JiraIssue, component: str) -> bool:
    return _contains(issue.components, component)


def has_fix_version(issue: JiraIssue, version: str) -> bool:
    return _contains(issue.fix_versions, version)


def get_custom_field(issue: JiraIssue, field_name: str) -> Optional[str]:
    """
    Value of a custom field as text.

    ``field_name`` is the field id, with or without its ``customfield_``
    prefix. Option and user values give their display value, multi-value
    fields are joined with ", ".
    """
    if field_name.startswith(CUSTOM_FIELD_PREFIX):
        value = issue.custom_fields.get(field_name)
    else:
        value = issue.custom_fields.get(CUSTOM_FIELD_PREFIX + field_name)
    return _field_text(value)


def _field_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dict):
        for key in ('value', 'name', 'displayName', 'key'):
            if value.get(key) is not None:
                return str(value[key])
        return str(value)
    if isinstance(value, list):
        parts = [_field_text(item) for item in value]
        return ", ".join(part for part in parts if part is not None)
    return str(value)


def is_subtask(issue: JiraIssue) -> bool:
    return bool(issue.parent_key)


def is_overdue(issue: JiraIssue, today: Optional[date] = None) -> bool:
    """Due date in the past and no resolution."""
    if issue.due_date is None:
        return False
    today = today or date.today()
    return issue.due_date < today and not issue.resolution


def get_age_in_days(issue: JiraIssue, now: Optional[datetime] = None) -> int:
    """Whole days since creation, 0 when the creation time is unknown."""
    if issue.created_at is None:
        return 0
    now = _utc(now) if now else datetime.now(timezone.utc)
    return (now - _utc(issue.created_at)).days


def get_time_to_resolution_days(issue: JiraIssue) -> Optional[int]:
    if issue.created_at is None or issue.resolved_at is None:
        return None
    return (_utc(issue.resolved_at) - _utc(issue.created_at)).days


def format_duration(seconds: Optional[int]) -> Optional[str]:
    """
    Render a time tracking value, e.g. ``2d 3h 15m``, ``4h 0m`` or ``45m``.
    """
    if seconds is None:
        return None
    minutes_total = int(seconds) // 60
    days, rest = divmod(minutes_total, 24 * 60)
    hours, minutes = divmod(rest, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def extract_project_key(issue_key: Optional[str]) -> Optional[str]:
    """``PROJ`` from ``PROJ-123``."""
    if not issue_key:
        return None
    dash = issue_key.find('-')
    return issue_key[:dash] if dash > 0 else None


def extract_issue_number(issue_key: Optional[str]) -> Optional[int]:
    """``123`` from ``PROJ-123``."""
    if not issue_key:
        return None
    dash = issue_key.find('-')
    if dash < 0 or dash == len(issue_key) - 1:
        return None
    try:
        return int(issue_key[dash + 1:])
    except ValueError:
        return None


FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "HasLabel": has_label,
    "HasComponent": has_component,
    "HasFixVersion": has_fix_version,
    "GetCustomField": get_custom_field,
    "IsSubtask": is_subtask,
    "IsOverdue": is_overdue,
    "GetAgeInDays": get_age_in_days,
    "GetTimeToResolutionDays": get_time_to_resolution_days,
    "FormatDuration": format_duration,
    "ExtractProjectKey": extract_project_key,
    "ExtractIssueNumber": extract_issue_number,
}
