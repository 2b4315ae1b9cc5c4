"""
Tests for the GitHub row helper functions.
"""

from datetime import datetime, timezone

import pytest

from connectors.sources.github import library
from connectors.sources.github.schema import GitHubSchema

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestNamesAndLabels:
    """Test repository name and label helpers"""

    @pytest.mark.parametrize("full_name, expected", [
        ("octocat/hello-world", ("octocat", "hello-world")),
        ("octocat", ("", "")),
        ("a/b/c", ("", "")),
        (None, ("", "")),
    ])
    def test_parse_repo_full_name(self, full_name, expected):
        assert library.parse_repo_full_name(full_name) == expected

    def test_has_label_on_labels_column(self):
        assert library.has_label("bug, UI", "ui")
        assert not library.has_label("bug, ui", "docs")
        assert not library.has_label(None, "bug")

    def test_has_label_on_label_names(self):
        assert library.has_label(["bug", "ui"], "Bug")

    def test_label_count(self):
        assert library.label_count("bug, ui, ") == 2
        assert library.label_count("") == 0


class TestDates:
    """Test age and staleness helpers"""

    def test_days_between(self):
        start = datetime(2024, 5, 31, 0, 0, tzinfo=timezone.utc)
        assert library.days_between(start, NOW) == pytest.approx(1.5)

    def test_naive_dates_are_utc(self):
        assert library.days_between(datetime(2024, 5, 31), NOW) == pytest.approx(1.5)

    def test_age_days(self):
        assert library.age_days(datetime(2024, 5, 22, 12, 0, tzinfo=timezone.utc), now=NOW) == pytest.approx(10)

    def test_is_stale(self):
        assert library.is_stale(datetime(2024, 4, 1, tzinfo=timezone.utc), now=NOW)
        assert not library.is_stale(datetime(2024, 5, 20, tzinfo=timezone.utc), now=NOW)
        assert library.is_stale(datetime(2024, 5, 20, tzinfo=timezone.utc), stale_days=5, now=NOW)
        assert not library.is_stale(None)


class TestShortSha:
    """Test SHA shortening"""

    def test_default_length(self):
        assert library.short_sha("6dcb09b5b57875f334f61aebed695e2e4193db5e") == "6dcb09b"

    def test_custom_and_short_values(self):
        assert library.short_sha("6dcb09b5b5", length=4) == "6dcb"
        assert library.short_sha("abc") == "abc"
        assert library.short_sha(None) == ""


def test_schema_exposes_functions():
    functions = GitHubSchema(api=object()).get_library()
    assert set(functions) == {
        "ParseRepoFullName", "HasLabel", "LabelCount", "DaysBetween", "AgeDays", "IsStale", "ShortSha"
    }
