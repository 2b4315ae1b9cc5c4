"""
Tests for the GitHub API client.
"""

from unittest.mock import Mock

import pytest
import requests

from connectors.core.exceptions import ConfigurationError
from connectors.sources.github.github_client import GitHubClient
from tests.conftest import make_response


@pytest.fixture
def client():
    client = GitHubClient("test-token", backoff_seconds=0)
    client.session.request = Mock()
    return client


def requested_urls(client):
    return [call.args[1] for call in client.session.request.call_args_list]


class TestConfiguration:
    """Test client construction"""

    def test_missing_token(self):
        with pytest.raises(ConfigurationError):
            GitHubClient.from_settings()

    def test_from_settings(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "abc")
        monkeypatch.setenv("GITHUB_API_URL", "https://github.example.com/api/v3")

        client = GitHubClient.from_settings()

        assert client.base_url == "https://github.example.com/api/v3"
        assert client.session.headers['Authorization'] == "token abc"


class TestPaging:
    """Test list endpoints"""

    def test_page_parameters_are_added(self, client):
        client.session.request.return_value = make_response(200, [{'number': 1}])

        items = client.get_issues("octocat", "hello", {'state': 'open'}, per_page=50, page=3)

        assert items == [{'number': 1}]
        assert requested_urls(client) == ["https://api.github.com/repos/octocat/hello/issues"]
        assert client.session.request.call_args.kwargs['params'] == {'state': 'open', 'per_page': 50, 'page': 3}

    def test_search_items_are_unwrapped(self, client):
        client.session.request.return_value = make_response(200, {'total_count': 1, 'items': [{'id': 7}]})

        assert client.search_repositories("user:octocat fork:true") == [{'id': 7}]
        assert client.session.request.call_args.kwargs['params']['q'] == "user:octocat fork:true"

    def test_caller_params_are_not_mutated(self, client):
        client.session.request.return_value = make_response(200, [])
        params = {'state': 'all'}

        client.get_pull_requests("octocat", "hello", params)

        assert params == {'state': 'all'}

    def test_pull_request_detail(self, client):
        client.session.request.return_value = make_response(200, {'number': 5, 'additions': 3})

        assert client.get_pull_request("octocat", "hello", 5)['additions'] == 3
        assert requested_urls(client) == ["https://api.github.com/repos/octocat/hello/pulls/5"]


class TestOwnerRepositories:
    """Test the organization/user fallback"""

    def test_organization(self, client):
        client.session.request.return_value = make_response(200, [{'id': 1}])

        client.get_repositories_for_owner("octo-org", {'type': 'all'})

        assert requested_urls(client) == ["https://api.github.com/orgs/octo-org/repos"]

    def test_user_fallback_on_404(self, client):
        client.session.request.side_effect = [make_response(404), make_response(200, [{'id': 2}])]

        assert client.get_repositories_for_owner("octocat") == [{'id': 2}]
        assert requested_urls(client) == [
            "https://api.github.com/orgs/octocat/repos",
            "https://api.github.com/users/octocat/repos",
        ]

    def test_other_errors_propagate(self, client):
        client.session.request.return_value = make_response(403)

        with pytest.raises(requests.exceptions.HTTPError):
            client.get_repositories_for_owner("octocat")

        assert client.session.request.call_count == 1


class TestRateLimit:
    """Test rate limit tracking"""

    def test_headers_are_recorded(self, client):
        client.session.request.return_value = make_response(
            200, [], headers={'X-RateLimit-Remaining': '42', 'X-RateLimit-Reset': '1700000000'}
        )

        client.get_branches("octocat", "hello")

        assert client.rate_limit_remaining == 42
        assert client.rate_limit_reset == 1700000000
        assert not client.is_rate_limited()

    def test_exhausted_limit(self, client):
        client.session.request.return_value = make_response(200, [], headers={'X-RateLimit-Remaining': '0'})

        client.get_releases("octocat", "hello")

        assert client.is_rate_limited()

    def test_too_many_requests_is_retried(self, client):
        client.session.request.side_effect = [make_response(429), make_response(200, [])]

        assert client.get_commits("octocat", "hello") == []
        assert client.session.request.call_count == 2
