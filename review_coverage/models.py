"""Data models for review coverage analysis."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

GITHUB_TIME_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


def parse_github_timestamp(value: str) -> datetime:
    """Parse a GitHub API timestamp (always UTC) into an aware datetime."""
    return datetime.strptime(value, GITHUB_TIME_FORMAT).replace(tzinfo=timezone.utc)


def actor_login(item: Dict) -> Optional[str]:
    """Return the login of the user attached to an API object, if any.

    Deleted accounts come back with ``user: null``.
    """
    user = item.get('user') or {}
    return user.get('login')


@dataclass(frozen=True)
class PullRequest:
    """A pull request as returned by the list endpoint."""
    number: int
    author: str
    created_at: datetime
    updated_at: datetime
    base_owner: str
    base_repo: str
    html_url: str  # Cache key for line counts

    @classmethod
    def from_api(cls, data: Dict) -> 'PullRequest':
        """Build a PullRequest from the GitHub JSON representation.

        Args:
            data: A single item of the ``/pulls`` list response

        Returns:
            PullRequest instance
        """
        base_repo = data['base']['repo']
        return cls(
            number=data['number'],
            author=actor_login(data) or '',
            created_at=parse_github_timestamp(data['created_at']),
            updated_at=parse_github_timestamp(data['updated_at']),
            base_owner=base_repo['owner']['login'],
            base_repo=base_repo['name'],
            html_url=data['html_url'],
        )


@dataclass(frozen=True)
class ChangedFile:
    """A file touched by a pull request."""
    filename: str
    additions: int = 0

    @classmethod
    def from_api(cls, data: Dict) -> 'ChangedFile':
        return cls(filename=data['filename'], additions=data.get('additions', 0))


def _ratio(numerator: int, denominator: int) -> Optional[float]:
    if denominator <= 0:
        return None
    return numerator / denominator


@dataclass
class CoverageReport:
    """Aggregated results of one run."""
    total_prs: int = 0
    authored_prs: int = 0
    non_authored_prs: int = 0
    touched_prs: int = 0
    total_lines_added: int = 0
    authored_lines_added: int = 0
    non_authored_lines_added: int = 0
    touched_lines_added: int = 0

    @property
    def authored_ratio(self) -> Optional[float]:
        """Share of all added lines written by tracked users."""
        return _ratio(self.authored_lines_added, self.total_lines_added)

    @property
    def reviewed_ratio(self) -> Optional[float]:
        """Share of other authors' added lines that tracked users reviewed or commented on."""
        return _ratio(self.touched_lines_added, self.non_authored_lines_added)

    @property
    def participation_ratio(self) -> Optional[float]:
        """Share of all added lines that tracked users either wrote or reviewed."""
        return _ratio(self.authored_lines_added + self.touched_lines_added, self.total_lines_added)
