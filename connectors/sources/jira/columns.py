"""
Column maps for the Jira tables.
"""

from datetime import date, datetime

from connectors.engine.resolver import ColumnMap

ISSUE_COLUMNS = ColumnMap.from_attributes([
    ("Key", str, "key"),
    ("Id", str, "id"),
    ("Summary", str, "summary"),
    ("Description", str, "description"),
    ("Type", str, "type"),
    ("Status", str, "status"),
    ("Priority", str, "priority"),
    ("Resolution", str, "resolution"),
    ("Assignee", str, "assignee"),
    ("AssigneeDisplayName", str, "assignee_display_name"),
    ("Reporter", str, "reporter"),
    ("ReporterDisplayName", str, "reporter_display_name"),
    ("ProjectKey", str, "project_key"),
    ("CreatedAt", datetime, "created_at"),
    ("UpdatedAt", datetime, "updated_at"),
    ("ResolvedAt", datetime, "resolved_at"),
    ("DueDate", date, "due_date"),
    ("Labels", list, "labels"),
    ("Components", list, "components"),
    ("FixVersions", list, "fix_versions"),
    ("AffectsVersions", list, "affects_versions"),
    ("OriginalEstimateSeconds", int, "original_estimate_seconds"),
    ("RemainingEstimateSeconds", int, "remaining_estimate_seconds"),
    ("TimeSpentSeconds", int, "time_spent_seconds"),
    ("OriginalEstimate", str, "original_estimate"),
    ("RemainingEstimate", str, "remaining_estimate"),
    ("TimeSpent", str, "time_spent"),
    ("ParentKey", str, "parent_key"),
    ("Environment", str, "environment"),
    ("Votes", int, "votes"),
    ("SecurityLevel", str, "security_level"),
    ("Url", str, "url"),
])

PROJECT_COLUMNS = ColumnMap.from_attributes([
    ("Id", str, "id"),
    ("Key", str, "key"),
    ("Name", str, "name"),
    ("Description", str, "description"),
    ("Lead", str, "lead"),
    ("Url", str, "url"),
    ("Category", str, "category"),
    ("CategoryDescription", str, "category_description"),
    ("AvatarUrl", str, "avatar_url"),
])

COMMENT_COLUMNS = ColumnMap.from_attributes([
    ("Id", str, "id"),
    ("IssueKey", str, "issue_key"),
    ("Body", str, "body"),
    ("Author", str, "author"),
    ("AuthorDisplayName", str, "author_display_name"),
    ("UpdateAuthor", str, "update_author"),
    ("UpdateAuthorDisplayName", str, "update_author_display_name"),
    ("CreatedAt", datetime, "created_at"),
    ("UpdatedAt", datetime, "updated_at"),
    ("VisibilityGroup", str, "visibility_group"),
    ("VisibilityRole", str, "visibility_role"),
])
