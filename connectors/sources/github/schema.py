"""
GitHub schema.
"""

from types import MappingProxyType
from typing import Any, Tuple

from connectors.engine.chunks import RowSource
from connectors.engine.context import RuntimeContext
from connectors.sources.github.columns import (
    BRANCH_COLUMNS, COMMIT_COLUMNS, ISSUE_COLUMNS, PULL_REQUEST_COLUMNS, RELEASE_COLUMNS, REPOSITORY_COLUMNS
)
from connectors.sources.github.github_client import GitHubClient
from connectors.sources.github.library import FUNCTIONS
from connectors.sources.github.sources import (
    BranchesSource, CommitsSource, IssuesSource, PullRequestsSource, ReleasesSource, RepositoriesSource
)
from connectors.sources.schema import Constructor, Schema

REPOSITORIES_TABLE = "repositories"
ISSUES_TABLE = "issues"
PULL_REQUESTS_TABLE = "pullrequests"
COMMITS_TABLE = "commits"
BRANCHES_TABLE = "branches"
RELEASES_TABLE = "releases"

_OWNER = ("owner", str)
_REPO = ("repo", str)


class GitHubSchema(Schema):
    """GitHub repositories, issues, pull requests, commits, branches and releases."""

    schema_name = "github"

    tables = MappingProxyType({
        REPOSITORIES_TABLE: REPOSITORY_COLUMNS,
        ISSUES_TABLE: ISSUE_COLUMNS,
        PULL_REQUESTS_TABLE: PULL_REQUEST_COLUMNS,
        COMMITS_TABLE: COMMIT_COLUMNS,
        BRANCHES_TABLE: BRANCH_COLUMNS,
        RELEASES_TABLE: RELEASE_COLUMNS,
    })

    constructors = MappingProxyType({
        REPOSITORIES_TABLE: (
            Constructor(REPOSITORIES_TABLE),
            Constructor(REPOSITORIES_TABLE, (_OWNER,)),
        ),
        ISSUES_TABLE: (Constructor(ISSUES_TABLE, (_OWNER, _REPO)),),
        PULL_REQUESTS_TABLE: (Constructor(PULL_REQUESTS_TABLE, (_OWNER, _REPO)),),
        COMMITS_TABLE: (
            Constructor(COMMITS_TABLE, (_OWNER, _REPO)),
            Constructor(COMMITS_TABLE, (_OWNER, _REPO, ("branchOrSha", str))),
        ),
        BRANCHES_TABLE: (Constructor(BRANCHES_TABLE, (_OWNER, _REPO)),),
        RELEASES_TABLE: (Constructor(RELEASES_TABLE, (_OWNER, _REPO)),),
    })

    library = MappingProxyType(FUNCTIONS)

    _repository_sources = {
        ISSUES_TABLE: IssuesSource,
        PULL_REQUESTS_TABLE: PullRequestsSource,
        BRANCHES_TABLE: BranchesSource,
        RELEASES_TABLE: ReleasesSource,
    }

    def create_api(self) -> GitHubClient:
        return GitHubClient.from_settings()

    def create_row_source(self, table: str, context: RuntimeContext, parameters: Tuple[Any, ...]) -> RowSource:
        values = [str(parameter) for parameter in parameters]

        if table == REPOSITORIES_TABLE:
            return RepositoriesSource(self.api, context, values[0] if values else None)

        if table == COMMITS_TABLE:
            ref = values[2] if len(values) == 3 else None
            return CommitsSource(self.api, context, values[0], values[1], ref=ref)

        return self._repository_sources[table](self.api, context, values[0], values[1])
