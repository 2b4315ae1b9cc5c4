"""
Tests for the Jira row helper functions.
"""

from datetime import date, datetime, timezone

import pytest

from connectors.sources.jira import library
from connectors.sources.jira.entities import JiraIssue
from connectors.sources.jira.schema import JiraSchema


def make_issue(**fields):
    return JiraIssue(key="PROJ-12", id="10012", **fields)


class TestMembership:
    """Test label, component and fix version checks"""

    def test_has_label_ignores_case(self):
        issue = make_issue(labels=["Backend", "urgent"])
        assert library.has_label(issue, "backend")
        assert not library.has_label(issue, "frontend")

    def test_has_component(self):
        assert library.has_component(make_issue(components=["API"]), "api")
        assert not library.has_component(make_issue(), "api")

    def test_has_fix_version(self):
        assert library.has_fix_version(make_issue(fix_versions=["1.0", "1.1"]), "1.1")


class TestCustomFields:
    """Test custom field lookup"""

    def test_by_id_with_or_without_prefix(self):
        issue = make_issue(custom_fields={"customfield_10010": 8})
        assert library.get_custom_field(issue, "customfield_10010") == "8"
        assert library.get_custom_field(issue, "10010") == "8"

    def test_option_and_multi_values(self):
        issue = make_issue(custom_fields={
            "customfield_1": {"value": "Gold", "id": "3"},
            "customfield_2": [{"name": "alpha"}, {"name": "beta"}],
        })
        assert library.get_custom_field(issue, "customfield_1") == "Gold"
        assert library.get_custom_field(issue, "customfield_2") == "alpha, beta"

    def test_missing_field(self):
        assert library.get_custom_field(make_issue(), "customfield_404") is None


class TestDates:
    """Test date based helpers"""

    def test_is_overdue(self):
        today = date(2024, 3, 1)
        assert library.is_overdue(make_issue(due_date=date(2024, 2, 28)), today=today)
        assert not library.is_overdue(make_issue(due_date=date(2024, 2, 28), resolution="Fixed"), today=today)
        assert not library.is_overdue(make_issue(due_date=date(2024, 3, 1)), today=today)
        assert not library.is_overdue(make_issue(), today=today)

    def test_age_in_days(self):
        issue = make_issue(created_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
        assert library.get_age_in_days(issue, now=datetime(2024, 1, 11, 11, 0, tzinfo=timezone.utc)) == 9
        assert library.get_age_in_days(make_issue()) == 0

    def test_time_to_resolution(self):
        issue = make_issue(
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            resolved_at=datetime(2024, 1, 4, 6, 0, tzinfo=timezone.utc),
        )
        assert library.get_time_to_resolution_days(issue) == 3
        assert library.get_time_to_resolution_days(make_issue(created_at=datetime(2024, 1, 1))) is None


class TestFormattingAndKeys:
    """Test duration formatting and issue key parsing"""

    @pytest.mark.parametrize("seconds, expected", [
        (None, None),
        (0, "0m"),
        (45 * 60, "45m"),
        (4 * 3600, "4h 0m"),
        (2 * 86400 + 3 * 3600 + 15 * 60, "2d 3h 15m"),
    ])
    def test_format_duration(self, seconds, expected):
        assert library.format_duration(seconds) == expected

    def test_extract_project_key(self):
        assert library.extract_project_key("PROJ-123") == "PROJ"
        assert library.extract_project_key("-123") is None
        assert library.extract_project_key(None) is None

    def test_extract_issue_number(self):
        assert library.extract_issue_number("PROJ-123") == 123
        assert library.extract_issue_number("PROJ-") is None
        assert library.extract_issue_number("PROJ-abc") is None
        assert library.extract_issue_number("PROJ") is None

    def test_is_subtask(self):
        assert library.is_subtask(make_issue(parent_key="PROJ-1"))
        assert not library.is_subtask(make_issue())


class TestSchemaLibrary:
    """Test that the schema exposes the helpers by query name"""

    def test_query_names(self):
        functions = JiraSchema(api=object()).get_library()
        assert functions["HasLabel"] is library.has_label
        assert functions["ExtractIssueNumber"]("OPS-7") == 7
        assert len(functions) == 11
