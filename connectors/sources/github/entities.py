"""
GitHub entities built from REST API payloads.
"""

from dataclasses import dataclass, field
from datetime import datetime
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


def _get(data: Optional[Dict[str, Any]], key: str) -> Any:
    return data.get(key) if data else None


@dataclass
class GitHubRepository:
    id: int
    name: str
    full_name: str
    description: Optional[str] = None
    url: Optional[str] = None
    clone_url: Optional[str] = None
    ssh_url: Optional[str] = None
    default_branch: Optional[str] = None
    is_private: bool = False
    is_fork: bool = False
    is_archived: bool = False
    language: Optional[str] = None
    forks_count: int = 0
    stargazers_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    size: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None
    owner_login: Optional[str] = None
    license: Optional[str] = None
    topics: List[str] = field(default_factory=list)
    has_issues: bool = False
    has_wiki: bool = False
    has_downloads: bool = False
    visibility: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GitHubRepository":
        return cls(
            id=data['id'],
            name=data['name'],
            full_name=data.get('full_name', data['name']),
            description=data.get('description'),
            url=data.get('html_url'),
            clone_url=data.get('clone_url'),
            ssh_url=data.get('ssh_url'),
            default_branch=data.get('default_branch'),
            is_private=bool(data.get('private')),
            is_fork=bool(data.get('fork')),
            is_archived=bool(data.get('archived')),
            language=data.get('language'),
            forks_count=data.get('forks_count', 0),
            stargazers_count=data.get('stargazers_count', 0),
            watchers_count=data.get('watchers_count', 0),
            open_issues_count=data.get('open_issues_count', 0),
            size=data.get('size', 0),
            created_at=parse_datetime(data.get('created_at')),
            updated_at=parse_datetime(data.get('updated_at')),
            pushed_at=parse_datetime(data.get('pushed_at')),
            owner_login=_get(data.get('owner'), 'login'),
            license=_get(data.get('license'), 'name'),
            topics=list(data.get('topics') or []),
            has_issues=bool(data.get('has_issues')),
            has_wiki=bool(data.get('has_wiki')),
            has_downloads=bool(data.get('has_downloads')),
            visibility=data.get('visibility') or ('private' if data.get('private') else 'public')
        )


@dataclass
class GitHubIssue:
    id: int
    number: int
    title: Optional[str] = None
    body: Optional[str] = None
    state: Optional[str] = None
    url: Optional[str] = None
    author_login: Optional[str] = None
    author_id: Optional[int] = None
    assignee_login: Optional[str] = None
    assignees: Optional[str] = None
    labels: Optional[str] = None
    label_names: List[str] = field(default_factory=list)
    milestone_title: Optional[str] = None
    milestone_number: Optional[int] = None
    comments: int = 0
    is_pull_request: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    closed_by_login: Optional[str] = None
    locked: bool = False
    active_lock_reason: Optional[str] = None
    repository_url: Optional[str] = None
    state_reason: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GitHubIssue":
        label_names = [label['name'] for label in data.get('labels') or [] if label.get('name')]
        assignees = [assignee['login'] for assignee in data.get('assignees') or [] if assignee.get('login')]
        milestone = data.get('milestone')
        return cls(
            id=data['id'],
            number=data['number'],
            title=data.get('title'),
            body=data.get('body'),
            state=data.get('state'),
            url=data.get('html_url'),
            author_login=_get(data.get('user'), 'login'),
            author_id=_get(data.get('user'), 'id'),
            assignee_login=_get(data.get('assignee'), 'login'),
            assignees=", ".join(assignees),
            labels=", ".join(label_names),
            label_names=label_names,
            milestone_title=_get(milestone, 'title'),
            milestone_number=_get(milestone, 'number'),
            comments=data.get('comments', 0),
            is_pull_request='pull_request' in data,
            created_at=parse_datetime(data.get('created_at')),
            updated_at=parse_datetime(data.get('updated_at')),
            closed_at=parse_datetime(data.get('closed_at')),
            closed_by_login=_get(data.get('closed_by'), 'login'),
            locked=bool(data.get('locked')),
            active_lock_reason=data.get('active_lock_reason'),
            repository_url=data.get('repository_url'),
            state_reason=data.get('state_reason')
        )


@dataclass
class GitHubPullRequest:
    """
    Pull request row.

    The list endpoint omits merge and diff statistics; those columns stay
    None when the per-item detail call failed.
    """

    id: int
    number: int
    title: Optional[str] = None
    body: Optional[str] = None
    state: Optional[str] = None
    url: Optional[str] = None
    author_login: Optional[str] = None
    author_id: Optional[int] = None
    assignee_login: Optional[str] = None
    assignees: Optional[str] = None
    labels: Optional[str] = None
    label_names: List[str] = field(default_factory=list)
    milestone_title: Optional[str] = None
    milestone_number: Optional[int] = None
    head_label: Optional[str] = None
    head_ref: Optional[str] = None
    head_sha: Optional[str] = None
    head_repository: Optional[str] = None
    base_ref: Optional[str] = None
    base_sha: Optional[str] = None
    base_repository: Optional[str] = None
    merged: bool = False
    mergeable: Optional[bool] = None
    mergeable_state: Optional[str] = None
    merged_by_login: Optional[str] = None
    merge_commit_sha: Optional[str] = None
    comments: Optional[int] = None
    commits: Optional[int] = None
    additions: Optional[int] = None
    deletions: Optional[int] = None
    changed_files: Optional[int] = None
    draft: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None
    locked: bool = False
    active_lock_reason: Optional[str] = None
    is_detailed: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any], detailed: bool = False) -> "GitHubPullRequest":
        label_names = [label['name'] for label in data.get('labels') or [] if label.get('name')]
        assignees = [assignee['login'] for assignee in data.get('assignees') or [] if assignee.get('login')]
        milestone = data.get('milestone')
        head = data.get('head') or {}
        base = data.get('base') or {}
        merged_at = parse_datetime(data.get('merged_at'))
        return cls(
            id=data['id'],
            number=data['number'],
            title=data.get('title'),
            body=data.get('body'),
            state=data.get('state'),
            url=data.get('html_url'),
            author_login=_get(data.get('user'), 'login'),
            author_id=_get(data.get('user'), 'id'),
            assignee_login=_get(data.get('assignee'), 'login'),
            assignees=", ".join(assignees),
            labels=", ".join(label_names),
            label_names=label_names,
            milestone_title=_get(milestone, 'title'),
            milestone_number=_get(milestone, 'number'),
            head_label=head.get('label'),
            head_ref=head.get('ref'),
            head_sha=head.get('sha'),
            head_repository=_get(head.get('repo'), 'full_name'),
            base_ref=base.get('ref'),
            base_sha=base.get('sha'),
            base_repository=_get(base.get('repo'), 'full_name'),
            merged=bool(data.get('merged', merged_at is not None)),
            mergeable=data.get('mergeable'),
            mergeable_state=data.get('mergeable_state'),
            merged_by_login=_get(data.get('merged_by'), 'login'),
            merge_commit_sha=data.get('merge_commit_sha'),
            comments=data.get('comments'),
            commits=data.get('commits'),
            additions=data.get('additions'),
            deletions=data.get('deletions'),
            changed_files=data.get('changed_files'),
            draft=bool(data.get('draft')),
            created_at=parse_datetime(data.get('created_at')),
            updated_at=parse_datetime(data.get('updated_at')),
            closed_at=parse_datetime(data.get('closed_at')),
            merged_at=merged_at,
            locked=bool(data.get('locked')),
            active_lock_reason=data.get('active_lock_reason'),
            is_detailed=detailed
        )


@dataclass
class GitHubCommit:
    sha: str
    short_sha: str
    message: Optional[str] = None
    url: Optional[str] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    author_login: Optional[str] = None
    author_id: Optional[int] = None
    author_date: Optional[datetime] = None
    committer_name: Optional[str] = None
    committer_email: Optional[str] = None
    committer_login: Optional[str] = None
    committer_id: Optional[int] = None
    committer_date: Optional[datetime] = None
    additions: Optional[int] = None
    deletions: Optional[int] = None
    total: Optional[int] = None
    parent_shas: Optional[str] = None
    parent_count: int = 0
    comment_count: int = 0
    verified: Optional[bool] = None
    verification_reason: Optional[str] = None
    files_changed: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GitHubCommit":
        commit = data.get('commit') or {}
        git_author = commit.get('author') or {}
        git_committer = commit.get('committer') or {}
        verification = commit.get('verification') or {}
        stats = data.get('stats') or {}
        parents = [parent['sha'] for parent in data.get('parents') or [] if parent.get('sha')]
        files = data.get('files')
        return cls(
            sha=data['sha'],
            short_sha=data['sha'][:7],
            message=commit.get('message'),
            url=data.get('html_url'),
            author_name=git_author.get('name'),
            author_email=git_author.get('email'),
            author_login=_get(data.get('author'), 'login'),
            author_id=_get(data.get('author'), 'id'),
            author_date=parse_datetime(git_author.get('date')),
            committer_name=git_committer.get('name'),
            committer_email=git_committer.get('email'),
            committer_login=_get(data.get('committer'), 'login'),
            committer_id=_get(data.get('committer'), 'id'),
            committer_date=parse_datetime(git_committer.get('date')),
            additions=stats.get('additions'),
            deletions=stats.get('deletions'),
            total=stats.get('total'),
            parent_shas=", ".join(parents),
            parent_count=len(parents),
            comment_count=commit.get('comment_count', 0),
            verified=verification.get('verified'),
            verification_reason=verification.get('reason'),
            files_changed=len(files) if files is not None else None
        )


@dataclass
class GitHubBranch:
    name: str
    commit_sha: Optional[str] = None
    commit_url: Optional[str] = None
    protected: bool = False
    repository_owner: Optional[str] = None
    repository_name: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], owner: str, repo: str) -> "GitHubBranch":
        commit = data.get('commit') or {}
        return cls(
            name=data['name'],
            commit_sha=commit.get('sha'),
            commit_url=commit.get('url'),
            protected=bool(data.get('protected')),
            repository_owner=owner,
            repository_name=repo
        )


@dataclass
class GitHubRelease:
    id: int
    tag_name: str
    name: Optional[str] = None
    body: Optional[str] = None
    url: Optional[str] = None
    target_commitish: Optional[str] = None
    draft: bool = False
    prerelease: bool = False
    author_login: Optional[str] = None
    author_id: Optional[int] = None
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    assets_count: int = 0
    tarball_url: Optional[str] = None
    zipball_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GitHubRelease":
        return cls(
            id=data['id'],
            tag_name=data['tag_name'],
            name=data.get('name'),
            body=data.get('body'),
            url=data.get('html_url'),
            target_commitish=data.get('target_commitish'),
            draft=bool(data.get('draft')),
            prerelease=bool(data.get('prerelease')),
            author_login=_get(data.get('author'), 'login'),
            author_id=_get(data.get('author'), 'id'),
            created_at=parse_datetime(data.get('created_at')),
            published_at=parse_datetime(data.get('published_at')),
            assets_count=len(data.get('assets') or []),
            tarball_url=data.get('tarball_url'),
            zipball_url=data.get('zipball_url')
        )
