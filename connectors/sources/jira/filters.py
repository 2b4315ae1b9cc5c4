"""
Jira filter vocabulary.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import ClassVar, Dict, List, Optional

from connectors.engine.expressions import Operator
from connectors.pushdown.vocabulary import (
    FieldKind, FilterField, list_field, range_field, search_field, text_field
)


@dataclass
class JiraFilterParameters:
    """Issue filters JQL can express."""

    status: Optional[str] = None
    issue_type: Optional[str] = None
    priority: Optional[str] = None
    resolution: Optional[str] = None
    assignee: Optional[str] = None
    reporter: Optional[str] = None
    project_key: Optional[str] = None
    key: Optional[str] = None
    parent_key: Optional[str] = None
    fix_version: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    components: List[str] = field(default_factory=list)
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    updated_after: Optional[datetime] = None
    updated_before: Optional[datetime] = None
    summary_contains: Optional[str] = None
    text_search: Optional[str] = None

    FIELDS: ClassVar[Dict[str, FilterField]] = {
        "status": text_field("status"),
        "type": text_field("issue_type"),
        "priority": text_field("priority"),
        "resolution": text_field("resolution"),
        "assignee": text_field("assignee"),
        "assigneedisplayname": text_field("assignee"),
        "reporter": text_field("reporter"),
        "reporterdisplayname": text_field("reporter"),
        "projectkey": text_field("project_key"),
        "key": text_field("key"),
        "parentkey": text_field("parent_key"),
        # FixVersions is a list column; one version pushes as fixVersion = "..."
        "fixversions": FilterField("fix_version", FieldKind.SCALAR, operators=frozenset({Operator.CONTAINS})),
        "labels": list_field("labels"),
        "components": list_field("components"),
        "createdat": range_field("created_after", "created_before"),
        "updatedat": range_field("updated_after", "updated_before"),
        "summary": search_field("summary_contains"),
        "description": search_field("text_search"),
    }

    @property
    def has_date_bounds(self) -> bool:
        return any(value is not None for value in (
            self.created_after, self.created_before, self.updated_after, self.updated_before
        ))

    def without_text_search(self) -> "JiraFilterParameters":
        """Copy with the word-search filters cleared."""
        return replace(
            self,
            labels=list(self.labels),
            components=list(self.components),
            summary_contains=None,
            text_search=None
        )
