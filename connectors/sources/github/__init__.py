"""
GitHub connector: repository-scoped tables over the GitHub REST API.
"""

from .filters import GitHubFilterParameters
from .github_requests import RepositoryRequest, IssueRequest, PullRequestRequest, CommitRequest
from .github_client import GitHubClient
from .schema import GitHubSchema

__all__ = [
    'GitHubFilterParameters',
    'RepositoryRequest',
    'IssueRequest',
    'PullRequestRequest',
    'CommitRequest',
    'GitHubClient',
    'GitHubSchema',
]
