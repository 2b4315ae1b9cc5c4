"""
GitHub filter vocabulary.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Dict, List, Optional

from connectors.pushdown.vocabulary import (
    FilterField, flag_field, int_field, list_field, range_field, text_field
)


@dataclass
class GitHubFilterParameters:
    """Filters the GitHub REST list endpoints can express."""

    state: Optional[str] = None
    author: Optional[str] = None
    assignee: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    milestone_number: Optional[int] = None
    head_label: Optional[str] = None
    base_ref: Optional[str] = None
    sha: Optional[str] = None
    language: Optional[str] = None
    visibility: Optional[str] = None
    is_archived: Optional[bool] = None
    is_fork: Optional[bool] = None
    created_after: Optional[datetime] = None
    updated_after: Optional[datetime] = None
    committed_after: Optional[datetime] = None

    FIELDS: ClassVar[Dict[str, FilterField]] = {
        "state": text_field("state"),
        "authorlogin": text_field("author"),
        "assigneelogin": text_field("assignee"),
        "labelnames": list_field("labels"),
        "milestonenumber": int_field("milestone_number"),
        "headlabel": text_field("head_label"),
        "baseref": text_field("base_ref"),
        "sha": text_field("sha"),
        "language": text_field("language"),
        "visibility": text_field("visibility"),
        "isarchived": flag_field("is_archived"),
        "isfork": flag_field("is_fork"),
        "createdat": range_field("created_after"),
        "updatedat": range_field("updated_after"),
        "committerdate": range_field("committed_after"),
    }
