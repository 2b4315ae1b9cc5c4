"""
Jira table sources: issues, projects, comments.
"""

import re
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional

from connectors.core.config import get_settings
from connectors.engine.context import RuntimeContext
from connectors.pushdown.extractor import extract_filters
from connectors.pushdown.vocabulary import FilterField, text_field
from connectors.sources.base import ListRowSource, PagedRowSource
from connectors.sources.jira.columns import COMMENT_COLUMNS, ISSUE_COLUMNS, PROJECT_COLUMNS
from connectors.sources.jira.entities import JiraComment, JiraIssue, JiraProject
from connectors.sources.jira.filters import JiraFilterParameters
from connectors.sources.jira.jql_builder import build_jql, ensure_ordering

PROJECT_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]+$")
ISSUE_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]+-\d+$")


def base_jql_for(project_key_or_jql: Optional[str]) -> Optional[str]:
    """``project = KEY`` for a project key, the argument itself for anything else."""
    if not project_key_or_jql or not project_key_or_jql.strip():
        return None
    value = project_key_or_jql.strip()
    if PROJECT_KEY_PATTERN.match(value):
        return f"project = {value}"
    return value


class IssuesSource(PagedRowSource):
    """
    ``jira.issues(projectKeyOrJql)``.

    Pushes the query's filters into JQL and follows the search API page by
    page.
    """

    source_name = "jira_issues"
    column_map = ISSUE_COLUMNS

    def __init__(self, api, context: RuntimeContext, project_key_or_jql: Optional[str] = None,
                 page_size: Optional[int] = None, text_search: Optional[bool] = None,
                 queue_size: Optional[int] = None):
        settings = get_settings()
        super().__init__(context, page_size or settings.JIRA_PAGE_SIZE, queue_size)
        self.api = api
        self.project_key_or_jql = project_key_or_jql
        self.text_search = settings.JIRA_PUSHDOWN_TEXT_SEARCH if text_search is None else text_search
        self.jql: Optional[str] = None

    def build_query(self) -> str:
        parameters = extract_filters(self.context.where, JiraFilterParameters)
        if not self.text_search:
            parameters = parameters.without_text_search()
        time_zone = None
        if parameters.has_date_bounds:
            time_zone = self.api.get_user_time_zone(cancellation=self.context.cancellation)
        return ensure_ordering(build_jql(base_jql_for(self.project_key_or_jql), parameters, time_zone))

    def fetch_page(self, page: int, page_size: int) -> List[JiraIssue]:
        if self.jql is None:
            # Inside the page loop, so a cancelled time zone lookup ends the fetch as cancelled
            self.jql = self.build_query()
            self.logger.info(f"[JIRA] Fetching issues with JQL: {self.jql}")
        start_at = (page - 1) * page_size
        issues = self.api.search_issues(self.jql, page_size, start_at, cancellation=self.context.cancellation)
        base_url = getattr(self.api, "base_url", "")
        return [JiraIssue.from_api(issue, base_url) for issue in issues]


@dataclass
class ProjectFilterParameters:
    key: Optional[str] = None

    FIELDS: ClassVar[Dict[str, FilterField]] = {
        "key": text_field("key"),
    }


class ProjectsSource(ListRowSource):
    """``jira.projects()``; ``Key = '...'`` is answered with a single project lookup."""

    source_name = "jira_projects"
    column_map = PROJECT_COLUMNS

    def __init__(self, api, context: RuntimeContext, queue_size: Optional[int] = None):
        super().__init__(context, queue_size)
        self.api = api

    def fetch_all(self) -> List[JiraProject]:
        parameters = extract_filters(self.context.where, ProjectFilterParameters)
        if parameters.key:
            project = self.api.get_project(parameters.key, cancellation=self.context.cancellation)
            return [JiraProject.from_api(project)] if project else []
        return [JiraProject.from_api(project) for project in self.api.get_projects(cancellation=self.context.cancellation)]


class CommentsSource(ListRowSource):
    """
    ``jira.comments(issueKey)``.

    An issue key reads that issue's comments. A project key or JQL reads the
    comments of the first ``max_issues`` matching issues.
    """

    source_name = "jira_comments"
    column_map = COMMENT_COLUMNS

    def __init__(self, api, context: RuntimeContext, issue_key_or_jql: str, max_issues: int = 100,
                 queue_size: Optional[int] = None):
        super().__init__(context, queue_size)
        self.api = api
        self.issue_key_or_jql = issue_key_or_jql.strip()
        self.max_issues = max_issues

    def fetch_all(self) -> List[JiraComment]:
        cancellation = self.context.cancellation
        if ISSUE_KEY_PATTERN.match(self.issue_key_or_jql):
            comments = self.api.get_comments(self.issue_key_or_jql, cancellation=cancellation)
        else:
            jql = ensure_ordering(base_jql_for(self.issue_key_or_jql) or "")
            comments = self.api.get_comments_for_issues(jql, self.max_issues, cancellation=cancellation)
        return [JiraComment.from_api(comment) for comment in comments]
