"""
GitHub request builders.

Each list endpoint gets a frozen request object built from the extracted
filters. to_params() renders it into query parameters; paging parameters
are added by the client.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from connectors.sources.github.filters import GitHubFilterParameters

GITHUB_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_STATES = frozenset({"open", "closed"})
_USER_REPO_VISIBILITIES = frozenset({"public", "private"})


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC, truncated to the second."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(GITHUB_DATE_FORMAT)


def _state(value: Optional[str]) -> str:
    if value and value.lower() in _STATES:
        return value.lower()
    return "all"


def _latest(*values: Optional[datetime]) -> Optional[datetime]:
    present = [value for value in values if value is not None]
    return max(present) if present else None


@dataclass(frozen=True)
class IssueRequest:
    state: str = "all"
    assignee: Optional[str] = None
    creator: Optional[str] = None
    milestone: Optional[int] = None
    since: Optional[datetime] = None
    labels: Tuple[str, ...] = ()

    @classmethod
    def from_filters(cls, parameters: GitHubFilterParameters) -> "IssueRequest":
        # Every issue's updated_at is at or after its created_at
        return cls(
            state=_state(parameters.state),
            assignee=parameters.assignee,
            creator=parameters.author,
            milestone=parameters.milestone_number,
            since=_latest(parameters.updated_after, parameters.created_after),
            labels=tuple(parameters.labels)
        )

    def to_params(self) -> Dict[str, str]:
        params = {'state': self.state}
        if self.assignee:
            params['assignee'] = self.assignee
        if self.creator:
            params['creator'] = self.creator
        if self.milestone is not None:
            params['milestone'] = str(self.milestone)
        if self.since is not None:
            params['since'] = format_timestamp(self.since)
        if self.labels:
            params['labels'] = ",".join(self.labels)
        return params


@dataclass(frozen=True)
class PullRequestRequest:
    state: str = "all"
    head: Optional[str] = None
    base: Optional[str] = None

    @classmethod
    def from_filters(cls, parameters: GitHubFilterParameters) -> "PullRequestRequest":
        return cls(
            state=_state(parameters.state),
            head=parameters.head_label,
            base=parameters.base_ref
        )

    def to_params(self) -> Dict[str, str]:
        params = {'state': self.state}
        if self.head:
            params['head'] = self.head
        if self.base:
            params['base'] = self.base
        return params


@dataclass(frozen=True)
class CommitRequest:
    sha: Optional[str] = None
    author: Optional[str] = None
    since: Optional[datetime] = None

    @classmethod
    def from_filters(cls, parameters: GitHubFilterParameters, ref: Optional[str] = None) -> "CommitRequest":
        """``ref`` (a branch or SHA table parameter) takes precedence over a ``Sha =`` filter."""
        return cls(
            sha=ref or parameters.sha,
            author=parameters.author,
            since=parameters.committed_after
        )

    def to_params(self) -> Dict[str, str]:
        params = {}
        if self.sha:
            params['sha'] = self.sha
        if self.author:
            params['author'] = self.author
        if self.since is not None:
            params['since'] = format_timestamp(self.since)
        return params


@dataclass(frozen=True)
class RepositoryRequest:
    """
    Repository listing.

    With an owner and a language, fork or archived filter the search API is
    used; otherwise the owner's (or the authenticated user's) repository list.
    """

    owner: Optional[str] = None
    language: Optional[str] = None
    is_fork: Optional[bool] = None
    is_archived: Optional[bool] = None
    visibility: Optional[str] = None

    @classmethod
    def from_filters(cls, parameters: GitHubFilterParameters, owner: Optional[str] = None) -> "RepositoryRequest":
        return cls(
            owner=owner,
            language=parameters.language,
            is_fork=parameters.is_fork,
            is_archived=parameters.is_archived,
            visibility=parameters.visibility
        )

    @property
    def uses_search(self) -> bool:
        return bool(self.owner) and (
            bool(self.language) or self.is_fork is not None or self.is_archived is not None
        )

    def search_query(self) -> str:
        qualifiers = [f"user:{self.owner}"]
        # Search leaves forks out unless asked
        if self.is_fork is None:
            qualifiers.append("fork:true")
        elif self.is_fork:
            qualifiers.append("fork:only")
        if self.language:
            language = f'"{self.language}"' if " " in self.language else self.language
            qualifiers.append(f"language:{language}")
        if self.is_archived is not None:
            qualifiers.append(f"archived:{'true' if self.is_archived else 'false'}")
        return " ".join(qualifiers)

    def to_params(self) -> Dict[str, str]:
        if self.uses_search:
            return {'q': self.search_query()}
        if self.owner:
            return {'type': 'all'}
        visibility = (self.visibility or "").lower()
        return {'visibility': visibility if visibility in _USER_REPO_VISIBILITIES else 'all'}
