"""
Column maps for the GitHub tables.
"""

from datetime import datetime

from connectors.engine.resolver import ColumnMap

REPOSITORY_COLUMNS = ColumnMap.from_attributes([
    ("Id", int, "id"),
    ("Name", str, "name"),
    ("FullName", str, "full_name"),
    ("Description", str, "description"),
    ("Url", str, "url"),
    ("CloneUrl", str, "clone_url"),
    ("SshUrl", str, "ssh_url"),
    ("DefaultBranch", str, "default_branch"),
    ("IsPrivate", bool, "is_private"),
    ("IsFork", bool, "is_fork"),
    ("IsArchived", bool, "is_archived"),
    ("Language", str, "language"),
    ("ForksCount", int, "forks_count"),
    ("StargazersCount", int, "stargazers_count"),
    ("WatchersCount", int, "watchers_count"),
    ("OpenIssuesCount", int, "open_issues_count"),
    ("Size", int, "size"),
    ("CreatedAt", datetime, "created_at"),
    ("UpdatedAt", datetime, "updated_at"),
    ("PushedAt", datetime, "pushed_at"),
    ("OwnerLogin", str, "owner_login"),
    ("License", str, "license"),
    ("Topics", list, "topics"),
    ("HasIssues", bool, "has_issues"),
    ("HasWiki", bool, "has_wiki"),
    ("HasDownloads", bool, "has_downloads"),
    ("Visibility", str, "visibility"),
])

ISSUE_COLUMNS = ColumnMap.from_attributes([
    ("Id", int, "id"),
    ("Number", int, "number"),
    ("Title", str, "title"),
    ("Body", str, "body"),
    ("State", str, "state"),
    ("Url", str, "url"),
    ("AuthorLogin", str, "author_login"),
    ("AuthorId", int, "author_id"),
    ("AssigneeLogin", str, "assignee_login"),
    ("Assignees", str, "assignees"),
    ("Labels", str, "labels"),
    ("LabelNames", list, "label_names"),
    ("MilestoneTitle", str, "milestone_title"),
    ("MilestoneNumber", int, "milestone_number"),
    ("Comments", int, "comments"),
    ("IsPullRequest", bool, "is_pull_request"),
    ("CreatedAt", datetime, "created_at"),
    ("UpdatedAt", datetime, "updated_at"),
    ("ClosedAt", datetime, "closed_at"),
    ("ClosedByLogin", str, "closed_by_login"),
    ("Locked", bool, "locked"),
    ("ActiveLockReason", str, "active_lock_reason"),
    ("RepositoryUrl", str, "repository_url"),
    ("StateReason", str, "state_reason"),
])

PULL_REQUEST_COLUMNS = ColumnMap.from_attributes([
    ("Id", int, "id"),
    ("Number", int, "number"),
    ("Title", str, "title"),
    ("Body", str, "body"),
    ("State", str, "state"),
    ("Url", str, "url"),
    ("AuthorLogin", str, "author_login"),
    ("AuthorId", int, "author_id"),
    ("AssigneeLogin", str, "assignee_login"),
    ("Assignees", str, "assignees"),
    ("Labels", str, "labels"),
    ("LabelNames", list, "label_names"),
    ("MilestoneTitle", str, "milestone_title"),
    ("MilestoneNumber", int, "milestone_number"),
    ("HeadLabel", str, "head_label"),
    ("HeadRef", str, "head_ref"),
    ("HeadSha", str, "head_sha"),
    ("HeadRepository", str, "head_repository"),
    ("BaseRef", str, "base_ref"),
    ("BaseSha", str, "base_sha"),
    ("BaseRepository", str, "base_repository"),
    ("Merged", bool, "merged"),
    ("Mergeable", bool, "mergeable"),
    ("MergeableState", str, "mergeable_state"),
    ("MergedByLogin", str, "merged_by_login"),
    ("MergeCommitSha", str, "merge_commit_sha"),
    ("Comments", int, "comments"),
    ("Commits", int, "commits"),
    ("Additions", int, "additions"),
    ("Deletions", int, "deletions"),
    ("ChangedFiles", int, "changed_files"),
    ("Draft", bool, "draft"),
    ("CreatedAt", datetime, "created_at"),
    ("UpdatedAt", datetime, "updated_at"),
    ("ClosedAt", datetime, "closed_at"),
    ("MergedAt", datetime, "merged_at"),
    ("Locked", bool, "locked"),
    ("ActiveLockReason", str, "active_lock_reason"),
])

COMMIT_COLUMNS = ColumnMap.from_attributes([
    ("Sha", str, "sha"),
    ("ShortSha", str, "short_sha"),
    ("Message", str, "message"),
    ("Url", str, "url"),
    ("AuthorName", str, "author_name"),
    ("AuthorEmail", str, "author_email"),
    ("AuthorLogin", str, "author_login"),
    ("AuthorId", int, "author_id"),
    ("AuthorDate", datetime, "author_date"),
    ("CommitterName", str, "committer_name"),
    ("CommitterEmail", str, "committer_email"),
    ("CommitterLogin", str, "committer_login"),
    ("CommitterId", int, "committer_id"),
    ("CommitterDate", datetime, "committer_date"),
    ("Additions", int, "additions"),
    ("Deletions", int, "deletions"),
    ("Total", int, "total"),
    ("ParentShas", str, "parent_shas"),
    ("ParentCount", int, "parent_count"),
    ("CommentCount", int, "comment_count"),
    ("Verified", bool, "verified"),
    ("VerificationReason", str, "verification_reason"),
    ("FilesChanged", int, "files_changed"),
])

BRANCH_COLUMNS = ColumnMap.from_attributes([
    ("Name", str, "name"),
    ("CommitSha", str, "commit_sha"),
    ("CommitUrl", str, "commit_url"),
    ("Protected", bool, "protected"),
    ("RepositoryOwner", str, "repository_owner"),
    ("RepositoryName", str, "repository_name"),
])

RELEASE_COLUMNS = ColumnMap.from_attributes([
    ("Id", int, "id"),
    ("TagName", str, "tag_name"),
    ("Name", str, "name"),
    ("Body", str, "body"),
    ("Url", str, "url"),
    ("TargetCommitish", str, "target_commitish"),
    ("Draft", bool, "draft"),
    ("Prerelease", bool, "prerelease"),
    ("AuthorLogin", str, "author_login"),
    ("AuthorId", int, "author_id"),
    ("CreatedAt", datetime, "created_at"),
    ("PublishedAt", datetime, "published_at"),
    ("AssetsCount", int, "assets_count"),
    ("TarballUrl", str, "tarball_url"),
    ("ZipballUrl", str, "zipball_url"),
])
