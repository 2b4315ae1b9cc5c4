"""
Jira connector: issues, projects and comments tables with JQL pushdown.
"""

from .filters import JiraFilterParameters
from .jql_builder import build_jql, ensure_ordering, escape_jql
from .jira_client import JiraAPIClient
from .schema import JiraSchema

__all__ = [
    'JiraFilterParameters',
    'build_jql',
    'ensure_ordering',
    'escape_jql',
    'JiraAPIClient',
    'JiraSchema',
]
