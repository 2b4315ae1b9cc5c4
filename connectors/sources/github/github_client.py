"""
GitHub API Client.

Page-based access to the GitHub REST list endpoints the GitHub tables read.
"""

import threading
from typing import Any, Dict, List, Optional

import requests

from connectors.core.config import get_settings
from connectors.core.exceptions import ConfigurationError
from connectors.core.logging_config import get_logger
from connectors.sources.http_client import ApiClient

logger = get_logger(__name__)


class GitHubClient(ApiClient):
    """Client for GitHub API interactions."""

    service_name = "GITHUB"

    def __init__(self, token: str, base_url: str = "https://api.github.com", timeout: int = 30,
                 max_retries: int = 3, backoff_seconds: float = 1.0):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token
            base_url: GitHub API base URL
        """
        super().__init__(base_url, timeout=timeout, max_retries=max_retries, backoff_seconds=backoff_seconds)
        self.rate_limit_remaining = 5000  # Default GitHub limit
        self.rate_limit_reset = None

        self.session.headers.update({
            'Authorization': f'token {token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'pushdown-connectors/1.0'
        })

    @classmethod
    def from_settings(cls) -> "GitHubClient":
        """
        Build a client from GITHUB_TOKEN and GITHUB_API_URL.

        Raises:
            ConfigurationError: When no token is configured
        """
        settings = get_settings()
        if not settings.github_configured:
            raise ConfigurationError("GITHUB_TOKEN must be set to use the GitHub connector")
        return cls(
            settings.GITHUB_TOKEN,
            settings.GITHUB_API_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            max_retries=settings.HTTP_MAX_RETRIES
        )

    def _after_response(self, response: requests.Response):
        """Update rate limit information from response headers."""
        remaining = response.headers.get('X-RateLimit-Remaining')
        if remaining is not None:
            self.rate_limit_remaining = int(remaining)
            self.rate_limit_reset = int(response.headers.get('X-RateLimit-Reset', 0))
            logger.debug(f"Rate limit updated: {self.rate_limit_remaining} requests remaining")
            if self.rate_limit_remaining <= 0:
                logger.warning(f"GitHub API rate limit reached, resets at {self.rate_limit_reset}")

    def is_rate_limited(self) -> bool:
        """Check if we have hit the rate limit (0 remaining requests)."""
        return self.rate_limit_remaining <= 0

    def _get_page(self, endpoint: str, params: Optional[Dict[str, Any]], per_page: int, page: int,
                  cancellation: Optional[threading.Event]) -> List[Dict[str, Any]]:
        page_params = dict(params or {})
        page_params['per_page'] = per_page
        page_params['page'] = page

        data = self._get_json(endpoint, params=page_params, cancellation=cancellation)

        # Search endpoints wrap results in an object with items
        items = data if isinstance(data, list) else data.get('items', [])
        logger.debug(f"Fetched page {page} of {endpoint} with {len(items)} items")
        return items

    def get_user_repositories(self, params: Optional[Dict[str, Any]] = None, per_page: int = 100, page: int = 1,
                              cancellation: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        """Repositories of the authenticated user."""
        return self._get_page("user/repos", params, per_page, page, cancellation)

    def get_repositories_for_owner(self, owner: str, params: Optional[Dict[str, Any]] = None, per_page: int = 100,
                                   page: int = 1, cancellation: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        """
        Repositories of an organization, or of a user when no such organization exists.
        """
        try:
            return self._get_page(f"orgs/{owner}/repos", params, per_page, page, cancellation)
        except requests.exceptions.HTTPError as e:
            if e.response is None or e.response.status_code != 404:
                raise
            logger.debug(f"{owner} is not an organization, listing user repositories")
            return self._get_page(f"users/{owner}/repos", params, per_page, page, cancellation)

    def search_repositories(self, query: str, per_page: int = 100, page: int = 1,
                            cancellation: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        """Repository search; GitHub returns at most 1000 results per query."""
        return self._get_page("search/repositories", {'q': query}, per_page, page, cancellation)

    def get_issues(self, owner: str, repo: str, params: Optional[Dict[str, Any]] = None, per_page: int = 100,
                   page: int = 1, cancellation: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        """Issues of a repository; GitHub includes pull requests in this list."""
        return self._get_page(f"repos/{owner}/{repo}/issues", params, per_page, page, cancellation)

    def get_pull_requests(self, owner: str, repo: str, params: Optional[Dict[str, Any]] = None, per_page: int = 100,
                          page: int = 1, cancellation: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        return self._get_page(f"repos/{owner}/{repo}/pulls", params, per_page, page, cancellation)

    def get_pull_request(self, owner: str, repo: str, number: int,
                         cancellation: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Full pull request, including merge and diff statistics the list endpoint omits."""
        return self._get_json(f"repos/{owner}/{repo}/pulls/{number}", cancellation=cancellation)

    def get_commits(self, owner: str, repo: str, params: Optional[Dict[str, Any]] = None, per_page: int = 100,
                    page: int = 1, cancellation: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        return self._get_page(f"repos/{owner}/{repo}/commits", params, per_page, page, cancellation)

    def get_branches(self, owner: str, repo: str, per_page: int = 100, page: int = 1,
                     cancellation: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        return self._get_page(f"repos/{owner}/{repo}/branches", None, per_page, page, cancellation)

    def get_releases(self, owner: str, repo: str, per_page: int = 100, page: int = 1,
                     cancellation: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        return self._get_page(f"repos/{owner}/{repo}/releases", None, per_page, page, cancellation)
