"""
Helper functions the host can call on GitHub rows, exposed under their query
names through FUNCTIONS.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

Labels = Union[str, Sequence[str], None]


def _label_list(labels: Labels) -> List[str]:
    """Labels column (comma separated) or a list of label names."""
    if not labels:
        return []
    if isinstance(labels, str):
        labels = labels.split(',')
    return [label.strip() for label in labels if label and label.strip()]


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _now(now: Optional[datetime]) -> datetime:
    return _utc(now) if now else datetime.now(timezone.utc)


def parse_repo_full_name(full_name: Optional[str]) -> Tuple[str, str]:
    """
    Split ``owner/repo``.

    Returns:
        (owner, repo), or two empty strings when the name is not of that form
    """
    if not full_name:
        return "", ""
    parts = full_name.split('/')
    if len(parts) != 2:
        return "", ""
    return parts[0], parts[1]


def has_label(labels: Labels, label: str) -> bool:
    wanted = label.lower()
    return any(name.lower() == wanted for name in _label_list(labels))


def label_count(labels: Labels) -> int:
    return len(_label_list(labels))


def days_between(start: datetime, end: Optional[datetime] = None) -> float:
    """Fractional days from ``start`` to ``end`` (now when omitted)."""
    return (_now(end) - _utc(start)).total_seconds() / 86400


def age_days(created_at: datetime, now: Optional[datetime] = None) -> float:
    return days_between(created_at, _now(now))


def is_stale(updated_at: Optional[datetime], stale_days: int = 30, now: Optional[datetime] = None) -> bool:
    """True when the last update is more than ``stale_days`` ago."""
    if updated_at is None:
        return False
    return days_between(updated_at, _now(now)) > stale_days


def short_sha(sha: Optional[str], length: int = 7) -> str:
    if not sha:
        return ""
    return sha[:length]


FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "ParseRepoFullName": parse_repo_full_name,
    "HasLabel": has_label,
    "LabelCount": label_count,
    "DaysBetween": days_between,
    "AgeDays": age_days,
    "IsStale": is_stale,
    "ShortSha": short_sha,
}
