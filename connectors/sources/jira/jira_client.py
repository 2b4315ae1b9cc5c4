"""
Jira API Client

Handles the Jira REST API calls the Jira tables need.

Jira Cloud searches through the enhanced JQL API, which pages with
``nextPageToken`` instead of offsets. Server/Data Center keeps the v2
offset search. The deployment is picked with JIRA_DEPLOYMENT.
"""

import threading
from datetime import tzinfo
from typing import Dict, List, Optional, Tuple

import requests
from dateutil import tz

from connectors.core.config import get_settings
from connectors.core.exceptions import ConfigurationError
from connectors.core.logging_config import get_logger
from connectors.sources.http_client import ApiClient

logger = get_logger(__name__)

CLOUD = "cloud"
SERVER = "server"

SEARCH_ENDPOINT = "rest/api/2/search"
ENHANCED_SEARCH_ENDPOINT = "rest/api/3/search/jql"
APPROXIMATE_COUNT_ENDPOINT = "rest/api/3/search/approximate-count"

# Queries whose page tokens are remembered at once
MAX_TOKEN_QUERIES = 32


class JiraAPIClient(ApiClient):
    """Client for Jira API."""

    service_name = "JIRA"

    def __init__(self, base_url: str, username: str, token: str, timeout: int = 30, max_retries: int = 3,
                 backoff_seconds: float = 1.0, deployment: str = CLOUD):
        super().__init__(base_url, timeout=timeout, max_retries=max_retries, backoff_seconds=backoff_seconds)
        if deployment not in (CLOUD, SERVER):
            raise ConfigurationError(f"Unknown Jira deployment '{deployment}', expected '{CLOUD}' or '{SERVER}'")
        self.username = username
        self.deployment = deployment
        self.session.auth = (username, token)
        self.session.headers.update({'Accept': 'application/json'})

        # (jql, page size, fields) -> {offset of a page: token that returns it}
        self._page_tokens: Dict[Tuple[str, int, Tuple[str, ...]], Dict[int, Optional[str]]] = {}
        self._token_lock = threading.Lock()
        self._time_zone: Optional[tzinfo] = None

    @classmethod
    def from_settings(cls) -> "JiraAPIClient":
        """
        Build a client from JIRA_URL, JIRA_USERNAME and JIRA_API_TOKEN.

        Raises:
            ConfigurationError: When any of them is missing
        """
        settings = get_settings()
        if not settings.jira_configured:
            raise ConfigurationError("JIRA_URL, JIRA_USERNAME and JIRA_API_TOKEN must be set to use the Jira connector")
        return cls(
            settings.JIRA_URL,
            settings.JIRA_USERNAME,
            settings.JIRA_API_TOKEN,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            max_retries=settings.HTTP_MAX_RETRIES,
            deployment=settings.JIRA_DEPLOYMENT
        )

    @property
    def is_cloud(self) -> bool:
        return self.deployment == CLOUD

    def search_issues(self, jql: str, max_results: int = 50, start_at: int = 0,
                      cancellation: Optional[threading.Event] = None) -> List[Dict]:
        """
        Fetch one page of issues matching a JQL query.

        Args:
            jql: JQL query string
            max_results: Page size (Jira caps it at 100)
            start_at: Zero-based offset of the first issue

        Returns:
            Raw issue objects
        """
        return self._search(jql, max_results, start_at, ['*navigable'], cancellation)

    def get_issue_count(self, jql: str, cancellation: Optional[threading.Event] = None) -> int:
        """Number of issues matching a JQL query; approximate on Cloud."""
        if self.is_cloud:
            result = self._post_json(APPROXIMATE_COUNT_ENDPOINT, {'jql': jql}, cancellation=cancellation)
            return int(result.get('count', 0))

        result = self._get_json(
            SEARCH_ENDPOINT,
            params={'jql': jql, 'startAt': 0, 'maxResults': 0},
            cancellation=cancellation
        )
        return int(result.get('total', 0))

    def get_user_time_zone(self, cancellation: Optional[threading.Event] = None) -> Optional[tzinfo]:
        """
        Time zone of the authenticated user, which Jira uses to read JQL dates.

        Returns:
            The zone, or None when the profile has none, names an unknown zone,
            or could not be read
        """
        if self._time_zone is not None:
            return self._time_zone

        try:
            profile = self._get_json("rest/api/2/myself", cancellation=cancellation)
        except requests.exceptions.RequestException as e:
            logger.warning(f"[JIRA] Could not read the user's time zone: {e}")
            return None

        name = profile.get('timeZone')
        zone = tz.gettz(name) if name else None
        if zone is None:
            logger.warning(f"[JIRA] Unknown user time zone '{name}'")
            return None

        logger.debug(f"[JIRA] User time zone is {name}")
        self._time_zone = zone
        return zone

    def get_projects(self, cancellation: Optional[threading.Event] = None) -> List[Dict]:
        """All projects visible to the user."""
        projects = self._get_json(
            "rest/api/2/project",
            params={'expand': 'description,lead,url'},
            cancellation=cancellation
        )
        logger.info(f"[JIRA] Fetched {len(projects)} projects")
        return projects

    def get_project(self, project_key: str, cancellation: Optional[threading.Event] = None) -> Optional[Dict]:
        """
        One project by key.

        Returns:
            The project, or None when Jira answers 404
        """
        try:
            return self._get_json(f"rest/api/2/project/{project_key}", cancellation=cancellation)
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                logger.info(f"[JIRA] Project {project_key} not found")
                return None
            raise

    def get_comments(self, issue_key: str, page_size: int = 100,
                     cancellation: Optional[threading.Event] = None) -> List[Dict]:
        """
        All comments of one issue, following the comment pagination.

        Each returned comment carries an added ``issueKey`` entry.
        """
        all_comments = []
        start_at = 0

        while True:
            result = self._get_json(
                f"rest/api/2/issue/{issue_key}/comment",
                params={'startAt': start_at, 'maxResults': page_size},
                cancellation=cancellation
            )
            batch = result.get('comments', [])
            for comment in batch:
                comment['issueKey'] = issue_key
            all_comments.extend(batch)

            total = result.get('total', len(all_comments))
            if not batch or len(batch) < page_size or start_at + len(batch) >= total:
                break
            start_at += len(batch)

        logger.debug(f"[JIRA] Fetched {len(all_comments)} comments for {issue_key}")
        return all_comments

    def get_comments_for_issues(self, jql: str, max_issues: int = 100,
                                cancellation: Optional[threading.Event] = None) -> List[Dict]:
        """Comments of the first ``max_issues`` issues matching a JQL query."""
        issues = self._search(jql, max_issues, 0, ['key'], cancellation)

        all_comments = []
        for issue in issues:
            all_comments.extend(self.get_comments(issue['key'], cancellation=cancellation))
        return all_comments

    def _search(self, jql: str, max_results: int, start_at: int, fields: List[str],
                cancellation: Optional[threading.Event]) -> List[Dict]:
        if self.is_cloud:
            return self._search_by_token(jql, max_results, start_at, fields, cancellation)

        params = {
            'jql': jql,
            'startAt': start_at,
            'maxResults': max_results,
            'fields': ','.join(fields)
        }
        result = self._get_json(SEARCH_ENDPOINT, params=params, cancellation=cancellation)
        issues = result.get('issues', [])
        logger.debug(f"[JIRA] Fetched {len(issues)} issues at offset {start_at} (total: {result.get('total')})")
        return issues

    def _search_by_token(self, jql: str, max_results: int, start_at: int, fields: List[str],
                         cancellation: Optional[threading.Event]) -> List[Dict]:
        """
        Offset search on top of the token-paged enhanced search.

        Tokens seen for a query are remembered by offset, so reading pages in
        order costs one call per page. An offset with no remembered token is
        reached by walking forward from the nearest one before it.
        """
        key = (jql, max_results, tuple(fields))
        with self._token_lock:
            if key not in self._page_tokens and len(self._page_tokens) >= MAX_TOKEN_QUERIES:
                self._page_tokens.clear()
            tokens = self._page_tokens.setdefault(key, {0: None})
            page_start = max(offset for offset in tokens if offset <= start_at)
            token = tokens[page_start]

        if page_start < start_at:
            logger.debug(f"[JIRA] Walking search pages from offset {page_start} to {start_at}")

        while True:
            body = {'jql': jql, 'maxResults': max_results, 'fields': fields}
            if token:
                body['nextPageToken'] = token

            result = self._post_json(ENHANCED_SEARCH_ENDPOINT, body, cancellation=cancellation)
            issues = result.get('issues', [])
            token = result.get('nextPageToken')
            page_end = page_start + len(issues)
            has_more = bool(issues and token and not result.get('isLast', False))

            if has_more:
                with self._token_lock:
                    tokens[page_end] = token

            if page_end > start_at or not has_more:
                logger.debug(f"[JIRA] Fetched {len(issues)} issues at offset {page_start}")
                return issues[max(start_at - page_start, 0):]

            page_start = page_end
