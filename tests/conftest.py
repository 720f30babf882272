"""
Shared fixtures: PR factories and a fake GitHub API behind a mocked session
"""

import pytest
import requests
from unittest.mock import Mock

from review_coverage.api_client import GitHubAPIClient
from review_coverage.models import PullRequest

API_URL = 'https://api.github.test'


class FakeGitHub:
    """Serves canned pages for URLs requested through a mocked session."""

    def __init__(self):
        self.pages = {}
        self.failures = {}
        self.calls = []

    def add(self, path, *pages):
        """Register the pages returned for an endpoint path."""
        self.pages[path] = list(pages)

    def fail(self, path, times, error=None):
        """Make the next `times` requests for a path raise an error."""
        self.failures[path] = [times, error or requests.exceptions.ConnectionError("Network error")]

    def get(self, url, params=None):
        path = url[len(API_URL):]
        page = (params or {}).get('page', 1)
        self.calls.append((path, page))

        failure = self.failures.get(path)
        if failure and failure[0] > 0:
            failure[0] -= 1
            raise failure[1]

        pages = self.pages.get(path, [[]])
        response = Mock()
        response.status_code = 200
        response.json.return_value = pages[page - 1]
        response.links = {'next': {'url': f"{url}?page={page + 1}"}} if page < len(pages) else {}
        return response

    def calls_to(self, path):
        return [call for call in self.calls if call[0] == path]


@pytest.fixture
def make_pr_data():
    """Factory for PR JSON as returned by the list endpoint."""
    def factory(number, author='alice', created_at='2024-03-05T12:00:00Z',
                updated_at='2024-03-10T12:00:00Z', owner='knative', repo='serving'):
        return {
            'number': number,
            'user': {'login': author},
            'created_at': created_at,
            'updated_at': updated_at,
            'html_url': f'https://github.com/{owner}/{repo}/pull/{number}',
            'base': {'repo': {'name': repo, 'owner': {'login': owner}}},
        }
    return factory


@pytest.fixture
def make_pr(make_pr_data):
    """Factory for PullRequest values."""
    def factory(number, **kwargs):
        return PullRequest.from_api(make_pr_data(number, **kwargs))
    return factory


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def api_client(fake_github):
    """GitHubAPIClient talking to the fake API without sleeping."""
    client = GitHubAPIClient(token='test_token', api_url=API_URL, request_delay=0.75,
                             max_retries=2, sleep=Mock())
    client.session.get = fake_github.get
    return client
