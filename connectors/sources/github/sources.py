"""
GitHub table sources.
"""

from typing import Any, Dict, List, Optional

import requests

from connectors.core.config import get_settings
from connectors.engine.context import RuntimeContext
from connectors.pushdown.extractor import extract_filters
from connectors.pushdown.paginator import enrich_each
from connectors.sources.base import PagedRowSource
from connectors.sources.github.columns import (
    BRANCH_COLUMNS, COMMIT_COLUMNS, ISSUE_COLUMNS, PULL_REQUEST_COLUMNS, RELEASE_COLUMNS, REPOSITORY_COLUMNS
)
from connectors.sources.github.entities import (
    GitHubBranch, GitHubCommit, GitHubIssue, GitHubPullRequest, GitHubRelease, GitHubRepository
)
from connectors.sources.github.filters import GitHubFilterParameters
from connectors.sources.github.github_requests import (
    CommitRequest, IssueRequest, PullRequestRequest, RepositoryRequest
)


class GitHubSource(PagedRowSource):
    """Common wiring for the repository-scoped GitHub tables."""

    def __init__(self, api, context: RuntimeContext, owner: str, repo: str, page_size: Optional[int] = None,
                 queue_size: Optional[int] = None):
        super().__init__(context, page_size or get_settings().GITHUB_PAGE_SIZE, queue_size)
        self.api = api
        self.owner = owner
        self.repo = repo

    def extract_parameters(self) -> GitHubFilterParameters:
        return extract_filters(self.context.where, GitHubFilterParameters)


class RepositoriesSource(PagedRowSource):
    """``github.repositories()`` and ``github.repositories(owner)``."""

    source_name = "github_repositories"
    column_map = REPOSITORY_COLUMNS

    def __init__(self, api, context: RuntimeContext, owner: Optional[str] = None, page_size: Optional[int] = None,
                 queue_size: Optional[int] = None):
        super().__init__(context, page_size or get_settings().GITHUB_PAGE_SIZE, queue_size)
        self.api = api
        self.owner = owner
        self.request: Optional[RepositoryRequest] = None

    def collect_chunks(self, channel):
        parameters = extract_filters(self.context.where, GitHubFilterParameters)
        self.request = RepositoryRequest.from_filters(parameters, self.owner)
        self.logger.info(f"[GITHUB] Listing repositories with {self.request.to_params()}")
        super().collect_chunks(channel)

    def fetch_page(self, page: int, page_size: int) -> List[GitHubRepository]:
        cancellation = self.context.cancellation
        if self.request.uses_search:
            items = self.api.search_repositories(self.request.search_query(), page_size, page, cancellation=cancellation)
        elif self.owner:
            items = self.api.get_repositories_for_owner(
                self.owner, self.request.to_params(), page_size, page, cancellation=cancellation
            )
        else:
            items = self.api.get_user_repositories(self.request.to_params(), page_size, page, cancellation=cancellation)
        return [GitHubRepository.from_api(item) for item in items]


class IssuesSource(GitHubSource):
    """``github.issues(owner, repo)``."""

    source_name = "github_issues"
    column_map = ISSUE_COLUMNS

    def collect_chunks(self, channel):
        self.request = IssueRequest.from_filters(self.extract_parameters())
        super().collect_chunks(channel)

    def fetch_page(self, page: int, page_size: int) -> List[GitHubIssue]:
        items = self.api.get_issues(
            self.owner, self.repo, self.request.to_params(), page_size, page, cancellation=self.context.cancellation
        )
        return [GitHubIssue.from_api(item) for item in items]


class PullRequestsSource(GitHubSource):
    """
    ``github.pullrequests(owner, repo)``.

    Every listed pull request is re-read through the detail endpoint for
    merge and diff statistics; a failed detail call keeps the listed data.
    """

    source_name = "github_pullrequests"
    column_map = PULL_REQUEST_COLUMNS

    def collect_chunks(self, channel):
        self.request = PullRequestRequest.from_filters(self.extract_parameters())
        super().collect_chunks(channel)

    def fetch_page(self, page: int, page_size: int) -> List[Dict[str, Any]]:
        return self.api.get_pull_requests(
            self.owner, self.repo, self.request.to_params(), page_size, page, cancellation=self.context.cancellation
        )

    def prepare_page(self, items: List[Dict[str, Any]]) -> List[GitHubPullRequest]:
        return enrich_each(
            items,
            self._load_details,
            self.source_name,
            recoverable=(requests.exceptions.RequestException,),
            fallback=GitHubPullRequest.from_api,
            cancellation=self.context.cancellation
        )

    def _load_details(self, item: Dict[str, Any]) -> GitHubPullRequest:
        details = self.api.get_pull_request(self.owner, self.repo, item['number'], cancellation=self.context.cancellation)
        return GitHubPullRequest.from_api(details, detailed=True)


class CommitsSource(GitHubSource):
    """``github.commits(owner, repo)`` and ``github.commits(owner, repo, branchOrSha)``."""

    source_name = "github_commits"
    column_map = COMMIT_COLUMNS

    def __init__(self, api, context: RuntimeContext, owner: str, repo: str, ref: Optional[str] = None,
                 page_size: Optional[int] = None, queue_size: Optional[int] = None):
        super().__init__(api, context, owner, repo, page_size, queue_size)
        self.ref = ref

    def collect_chunks(self, channel):
        self.request = CommitRequest.from_filters(self.extract_parameters(), self.ref)
        super().collect_chunks(channel)

    def fetch_page(self, page: int, page_size: int) -> List[GitHubCommit]:
        items = self.api.get_commits(
            self.owner, self.repo, self.request.to_params(), page_size, page, cancellation=self.context.cancellation
        )
        return [GitHubCommit.from_api(item) for item in items]


class BranchesSource(GitHubSource):
    """``github.branches(owner, repo)``."""

    source_name = "github_branches"
    column_map = BRANCH_COLUMNS

    def fetch_page(self, page: int, page_size: int) -> List[GitHubBranch]:
        items = self.api.get_branches(self.owner, self.repo, page_size, page, cancellation=self.context.cancellation)
        return [GitHubBranch.from_api(item, self.owner, self.repo) for item in items]


class ReleasesSource(GitHubSource):
    """``github.releases(owner, repo)``."""

    source_name = "github_releases"
    column_map = RELEASE_COLUMNS

    def fetch_page(self, page: int, page_size: int) -> List[GitHubRelease]:
        items = self.api.get_releases(self.owner, self.repo, page_size, page, cancellation=self.context.cancellation)
        return [GitHubRelease.from_api(item) for item in items]
