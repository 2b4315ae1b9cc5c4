"""
Tests for the JQL builder.
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from connectors.sources.jira.filters import JiraFilterParameters
from connectors.sources.jira.jql_builder import (
    build_jql, ensure_ordering, escape_jql, format_date, split_ordering
)


class TestClauseContainment:
    """Test that every populated field produces its clause"""

    def test_status(self):
        jql = build_jql(None, JiraFilterParameters(status="Open"))
        assert 'status = "Open"' in jql

    def test_labels_are_and_joined(self):
        jql = build_jql(None, JiraFilterParameters(labels=["bug", "urgent"]))
        assert 'labels = "bug"' in jql
        assert 'labels = "urgent"' in jql
        assert jql == 'labels = "bug" AND labels = "urgent"'

    def test_components(self):
        jql = build_jql(None, JiraFilterParameters(components=["api"]))
        assert jql == 'component = "api"'

    @pytest.mark.parametrize("value", ["unassigned", "UNASSIGNED", "null"])
    def test_unassigned_sentinel(self, value):
        jql = build_jql(None, JiraFilterParameters(assignee=value))
        assert "assignee is EMPTY" in jql
        assert '"unassigned"' not in jql.lower()

    def test_reporter_sentinel(self):
        assert build_jql(None, JiraFilterParameters(reporter="Null")) == "reporter is EMPTY"

    def test_identifiers_are_bare_when_plain_keys(self):
        jql = build_jql(None, JiraFilterParameters(project_key="PROJ", key="PROJ-12", parent_key="PROJ-1"))
        assert "project = PROJ" in jql
        assert "key = PROJ-12" in jql
        assert "parent = PROJ-1" in jql

    def test_identifiers_are_quoted_otherwise(self):
        jql = build_jql(None, JiraFilterParameters(project_key='My "Project"'))
        assert jql == 'project = "My \\"Project\\""'

    def test_reserved_word_identifier_is_quoted(self):
        assert build_jql(None, JiraFilterParameters(project_key="AND")) == 'project = "AND"'

    def test_text_search_clauses(self):
        jql = build_jql(None, JiraFilterParameters(summary_contains="login", text_search="timeout"))
        assert jql == 'summary ~ "login" AND text ~ "timeout"'

    def test_issue_type_and_fix_version(self):
        jql = build_jql(None, JiraFilterParameters(issue_type="Bug", fix_version="1.2"))
        assert jql == 'issuetype = "Bug" AND fixVersion = "1.2"'


class TestClauseOrder:
    """Test the fixed clause order"""

    def test_full_vocabulary_order(self):
        parameters = JiraFilterParameters(
            status="Open",
            issue_type="Bug",
            priority="High",
            resolution="Fixed",
            assignee="jane",
            reporter="john",
            project_key="PROJ",
            key="PROJ-1",
            parent_key="PROJ-2",
            fix_version="1.0",
            labels=["a"],
            components=["c"],
            created_after=datetime(2024, 1, 1),
            created_before=datetime(2024, 2, 1),
            updated_after=datetime(2024, 3, 1),
            updated_before=datetime(2024, 4, 1),
            summary_contains="s",
            text_search="t",
        )
        jql = build_jql("project = BASE", parameters, time_zone=timezone.utc)

        expected = [
            "project = BASE",
            'status = "Open"',
            'issuetype = "Bug"',
            'priority = "High"',
            'resolution = "Fixed"',
            'assignee = "jane"',
            'reporter = "john"',
            "project = PROJ",
            "key = PROJ-1",
            "parent = PROJ-2",
            'fixVersion = "1.0"',
            'labels = "a"',
            'component = "c"',
            'created >= "2024-01-01 00:00"',
            'created <= "2024-02-01 00:00"',
            'updated >= "2024-03-01 00:00"',
            'updated <= "2024-04-01 00:00"',
            'summary ~ "s"',
            'text ~ "t"',
        ]
        assert jql == " AND ".join(expected)

    def test_same_input_same_output(self):
        parameters = JiraFilterParameters(status="Open", labels=["x", "y"])
        assert build_jql(None, parameters) == build_jql(None, parameters)


class TestEscaping:
    """Test literal escaping"""

    def test_double_quotes_are_escaped(self):
        jql = build_jql(None, JiraFilterParameters(summary_contains='test "quoted" value'))
        assert jql == 'summary ~ "test \\"quoted\\" value"'

    def test_backslash_is_escaped_first(self):
        assert escape_jql('a\\"b') == 'a\\\\\\"b'


class TestDates:
    """Test date rendering"""

    def test_format_pattern(self):
        assert format_date(datetime(2024, 1, 5, 9, 7, 59)) == "2024-01-05 09:07"

    def test_aware_dates_are_rendered_in_utc(self):
        value = datetime(2024, 1, 5, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_date(value) == "2024-01-05 10:00"

    def test_rendered_in_given_zone(self):
        value = datetime(2024, 1, 5, 10, 0, tzinfo=timezone.utc)
        assert format_date(value, time_zone=timezone(timedelta(hours=5))) == "2024-01-05 15:00"

    def test_upper_bound_with_seconds_rounds_up(self):
        parameters = JiraFilterParameters(created_before=datetime(2024, 1, 5, 23, 59, 30))
        jql = build_jql(None, parameters, time_zone=timezone.utc)
        assert jql == 'created <= "2024-01-06 00:00"'

    def test_lower_bound_truncates(self):
        parameters = JiraFilterParameters(updated_after=datetime(2024, 1, 5, 10, 30, 45))
        jql = build_jql(None, parameters, time_zone=timezone.utc)
        assert jql == 'updated >= "2024-01-05 10:30"'

    def test_user_zone_bounds(self):
        plus_five = timezone(timedelta(hours=5))
        parameters = JiraFilterParameters(
            created_after=datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc),
            created_before=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
        )

        jql = build_jql(None, parameters, time_zone=plus_five)

        assert jql == 'created >= "2024-01-01 05:00" AND created <= "2024-01-01 15:00"'

    def test_unknown_zone_widens_both_bounds(self):
        parameters = JiraFilterParameters(
            created_after=datetime(2024, 1, 10, 0, 0, tzinfo=timezone.utc),
            created_before=datetime(2024, 1, 10, 10, 0, tzinfo=timezone.utc),
        )

        jql = build_jql(None, parameters)

        assert jql == 'created >= "2024-01-09 10:00" AND created <= "2024-01-11 00:00"'

    @pytest.mark.parametrize("offset_hours", [-12, -5, 0, 5, 14])
    def test_unknown_zone_never_narrows_the_window(self, offset_hours):
        lower = datetime(2024, 1, 10, 8, 0, tzinfo=timezone.utc)
        upper = datetime(2024, 1, 10, 10, 0, tzinfo=timezone.utc)
        user_zone = timezone(timedelta(hours=offset_hours))

        jql = build_jql(None, JiraFilterParameters(created_after=lower, created_before=upper))

        # Jira reads the rendered wall-clock times in the user's zone
        rendered = [
            datetime.strptime(literal, "%Y-%m-%d %H:%M").replace(tzinfo=user_zone)
            for literal in re.findall(r'"([^"]+)"', jql)
        ]
        assert rendered[0] <= lower
        assert rendered[1] >= upper

    def test_extreme_bounds_do_not_overflow(self):
        parameters = JiraFilterParameters(created_after=datetime.min, created_before=datetime.max)
        jql = build_jql(None, parameters)
        assert jql.startswith('created >= "')


class TestDefaultsAndBase:
    """Test the default query and base JQL handling"""

    def test_empty_gives_default_ordering(self):
        assert build_jql(None, JiraFilterParameters()) == "order by created DESC"

    def test_empty_string_base_gives_default_ordering(self):
        assert build_jql("", JiraFilterParameters()) == "order by created DESC"

    def test_base_alone(self):
        assert build_jql("project = PROJ", JiraFilterParameters()) == "project = PROJ"

    def test_base_with_or_is_parenthesised(self):
        jql = build_jql("project = A OR project = B", JiraFilterParameters(status="Open"))
        assert jql == '(project = A OR project = B) AND status = "Open"'

    def test_or_inside_quotes_is_not_a_disjunction(self):
        jql = build_jql('summary ~ "this or that"', JiraFilterParameters(status="Open"))
        assert jql == 'summary ~ "this or that" AND status = "Open"'

    def test_base_ordering_moves_to_the_end(self):
        jql = build_jql("project = PROJ ORDER BY updated ASC", JiraFilterParameters(status="Open"))
        assert jql == 'project = PROJ AND status = "Open" ORDER BY updated ASC'

    def test_base_that_is_only_ordering(self):
        assert build_jql("ORDER BY rank", JiraFilterParameters()) == "ORDER BY rank"

    def test_split_ordering(self):
        assert split_ordering("a = 1 order by b") == ("a = 1", "order by b")
        assert split_ordering("a = 1") == ("a = 1", None)


class TestEnsureOrdering:
    """Test ordering completion"""

    def test_appends_when_missing(self):
        assert ensure_ordering('status = "Open"') == 'status = "Open" ORDER BY created DESC'

    def test_keeps_existing(self):
        assert ensure_ordering("order by created DESC") == "order by created DESC"

    def test_quoted_order_by_does_not_count(self):
        jql = 'summary ~ "order by"'
        assert ensure_ordering(jql) == f"{jql} ORDER BY created DESC"


class TestInputErrors:
    """Test that malformed vocabulary state fails fast"""

    def test_wrong_vocabulary_type(self):
        with pytest.raises(TypeError):
            build_jql(None, {"status": "Open"})

    def test_wrong_scalar_type(self):
        with pytest.raises(TypeError):
            build_jql(None, JiraFilterParameters(status=5))

    def test_wrong_list_item_type(self):
        with pytest.raises(TypeError):
            build_jql(None, JiraFilterParameters(labels=["ok", 3]))

    def test_wrong_date_type(self):
        with pytest.raises(TypeError):
            build_jql(None, JiraFilterParameters(created_after="2024-01-01"))
