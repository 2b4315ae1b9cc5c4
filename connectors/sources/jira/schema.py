"""
Jira schema.
"""

from types import MappingProxyType
from typing import Any, Tuple

from connectors.engine.chunks import RowSource
from connectors.engine.context import RuntimeContext
from connectors.sources.jira.columns import COMMENT_COLUMNS, ISSUE_COLUMNS, PROJECT_COLUMNS
from connectors.sources.jira.jira_client import JiraAPIClient
from connectors.sources.jira.library import FUNCTIONS
from connectors.sources.jira.sources import CommentsSource, IssuesSource, ProjectsSource
from connectors.sources.schema import Constructor, Schema

ISSUES_TABLE = "issues"
PROJECTS_TABLE = "projects"
COMMENTS_TABLE = "comments"


class JiraSchema(Schema):
    """``jira.issues(projectKeyOrJql)``, ``jira.projects()``, ``jira.comments(issueKey)``."""

    schema_name = "jira"

    tables = MappingProxyType({
        ISSUES_TABLE: ISSUE_COLUMNS,
        PROJECTS_TABLE: PROJECT_COLUMNS,
        COMMENTS_TABLE: COMMENT_COLUMNS,
    })

    constructors = MappingProxyType({
        ISSUES_TABLE: (Constructor(ISSUES_TABLE, (("projectKeyOrJql", str),)),),
        PROJECTS_TABLE: (Constructor(PROJECTS_TABLE),),
        COMMENTS_TABLE: (Constructor(COMMENTS_TABLE, (("issueKey", str),)),),
    })

    library = MappingProxyType(FUNCTIONS)

    def create_api(self) -> JiraAPIClient:
        return JiraAPIClient.from_settings()

    def create_row_source(self, table: str, context: RuntimeContext, parameters: Tuple[Any, ...]) -> RowSource:
        if table == ISSUES_TABLE:
            return IssuesSource(self.api, context, str(parameters[0]))
        if table == PROJECTS_TABLE:
            return ProjectsSource(self.api, context)
        return CommentsSource(self.api, context, str(parameters[0]))
