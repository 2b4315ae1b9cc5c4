"""
Jira entities built from REST API payloads.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import dateutil.parser

from connectors.core.logging_config import get_logger

logger = get_logger(__name__)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return dateutil.parser.parse(value)
    except (ValueError, OverflowError) as e:
        logger.warning(f"Error parsing date '{value}': {e}")
        return None


def parse_date(value: Optional[str]) -> Optional[date]:
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def _name(value: Optional[Dict], key: str = 'name') -> Optional[str]:
    return value.get(key) if value else None


def _user_id(user: Optional[Dict]) -> Optional[str]:
    """Server/DC users have a name, Cloud users only an accountId."""
    if not user:
        return None
    return user.get('name') or user.get('accountId')


def _names(values: Optional[List[Dict]]) -> List[str]:
    return [value['name'] for value in values or [] if value.get('name')]


def extract_text(value: Any) -> Optional[str]:
    """
    Plain text of a rich text field.

    The v3 API (Cloud search) returns descriptions in Atlassian Document
    Format; v2 returns plain strings.
    """
    if not value:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        blocks = [_adf_text(node) for node in value.get('content') or []]
        text = "\n".join(block for block in blocks if block)
        return text or None
    return str(value)


def _adf_text(node: Dict[str, Any]) -> str:
    if node.get('type') == 'text':
        return node.get('text', '')
    if node.get('type') == 'hardBreak':
        return "\n"
    children = [_adf_text(child) for child in node.get('content') or []]
    if node.get('type') in ('paragraph', 'heading', 'codeBlock'):
        return "".join(children)
    return "\n".join(child for child in children if child)


@dataclass
class JiraIssue:
    key: str
    id: str
    summary: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    resolution: Optional[str] = None
    assignee: Optional[str] = None
    assignee_display_name: Optional[str] = None
    reporter: Optional[str] = None
    reporter_display_name: Optional[str] = None
    project_key: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    due_date: Optional[date] = None
    labels: List[str] = field(default_factory=list)
    components: List[str] = field(default_factory=list)
    fix_versions: List[str] = field(default_factory=list)
    affects_versions: List[str] = field(default_factory=list)
    original_estimate_seconds: Optional[int] = None
    remaining_estimate_seconds: Optional[int] = None
    time_spent_seconds: Optional[int] = None
    original_estimate: Optional[str] = None
    remaining_estimate: Optional[str] = None
    time_spent: Optional[str] = None
    parent_key: Optional[str] = None
    environment: Optional[str] = None
    votes: Optional[int] = None
    security_level: Optional[str] = None
    url: Optional[str] = None
    custom_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: Dict[str, Any], base_url: str = "") -> "JiraIssue":
        fields = data.get('fields') or {}
        time_tracking = fields.get('timetracking') or {}
        assignee = fields.get('assignee')
        reporter = fields.get('reporter')

        return cls(
            key=data['key'],
            id=str(data.get('id', '')),
            summary=fields.get('summary'),
            description=extract_text(fields.get('description')),
            type=_name(fields.get('issuetype')),
            status=_name(fields.get('status')),
            priority=_name(fields.get('priority')),
            resolution=_name(fields.get('resolution')),
            assignee=_user_id(assignee),
            assignee_display_name=_name(assignee, 'displayName'),
            reporter=_user_id(reporter),
            reporter_display_name=_name(reporter, 'displayName'),
            project_key=_name(fields.get('project'), 'key'),
            created_at=parse_datetime(fields.get('created')),
            updated_at=parse_datetime(fields.get('updated')),
            resolved_at=parse_datetime(fields.get('resolutiondate')),
            due_date=parse_date(fields.get('duedate')),
            labels=list(fields.get('labels') or []),
            components=_names(fields.get('components')),
            fix_versions=_names(fields.get('fixVersions')),
            affects_versions=_names(fields.get('versions')),
            original_estimate_seconds=fields.get('timeoriginalestimate'),
            remaining_estimate_seconds=fields.get('timeestimate'),
            time_spent_seconds=fields.get('timespent'),
            original_estimate=time_tracking.get('originalEstimate'),
            remaining_estimate=time_tracking.get('remainingEstimate'),
            time_spent=time_tracking.get('timeSpent'),
            parent_key=_name(fields.get('parent'), 'key'),
            environment=extract_text(fields.get('environment')),
            votes=_name(fields.get('votes'), 'votes'),
            security_level=_name(fields.get('security')),
            url=f"{base_url.rstrip('/')}/browse/{data['key']}" if base_url else None,
            custom_fields={name: value for name, value in fields.items() if name.startswith('customfield_')}
        )


@dataclass
class JiraProject:
    id: str
    key: str
    name: Optional[str] = None
    description: Optional[str] = None
    lead: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    category_description: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "JiraProject":
        category = data.get('projectCategory')
        return cls(
            id=str(data.get('id', '')),
            key=data['key'],
            name=data.get('name'),
            description=data.get('description'),
            lead=_name(data.get('lead'), 'displayName'),
            url=data.get('url') or data.get('self'),
            category=_name(category),
            category_description=_name(category, 'description'),
            avatar_url=(data.get('avatarUrls') or {}).get('48x48')
        )


@dataclass
class JiraComment:
    id: str
    issue_key: str
    body: Optional[str] = None
    author: Optional[str] = None
    author_display_name: Optional[str] = None
    update_author: Optional[str] = None
    update_author_display_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    visibility_group: Optional[str] = None
    visibility_role: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], issue_key: Optional[str] = None) -> "JiraComment":
        author = data.get('author')
        update_author = data.get('updateAuthor')
        visibility = data.get('visibility') or {}
        return cls(
            id=str(data.get('id', '')),
            issue_key=issue_key or data.get('issueKey', ''),
            body=data.get('body'),
            author=_user_id(author),
            author_display_name=_name(author, 'displayName'),
            update_author=_user_id(update_author),
            update_author_display_name=_name(update_author, 'displayName'),
            created_at=parse_datetime(data.get('created')),
            updated_at=parse_datetime(data.get('updated')),
            visibility_group=visibility.get('value') if visibility.get('type') == 'group' else None,
            visibility_role=visibility.get('value') if visibility.get('type') == 'role' else None
        )
