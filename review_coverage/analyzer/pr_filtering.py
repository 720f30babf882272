"""PR filtering functions for ReviewCoverageAnalyzer."""

from datetime import datetime
from typing import AbstractSet, Iterable, List, Tuple

from ..models import PullRequest


def filter_by_time(prs: Iterable[PullRequest], start: datetime, end: datetime) -> List[PullRequest]:
    """Keep PRs that were active inside the window.

    A PR is kept iff it was updated strictly after ``start`` and created
    strictly before ``end``. Order is preserved.

    Args:
        prs: PRs to filter
        start: Window start
        end: Window end

    Returns:
        Filtered list of PRs
    """
    return [pr for pr in prs if pr.updated_at > start and pr.created_at < end]


def partition_by_author(prs: Iterable[PullRequest],
                        users: AbstractSet[str]) -> Tuple[List[PullRequest], List[PullRequest]]:
    """Split PRs into those authored by tracked users and the rest.

    Args:
        prs: PRs to split
        users: Tracked logins (exact, case-sensitive match)

    Returns:
        Tuple of (authored, non_authored), each in input order
    """
    authored = []
    non_authored = []
    for pr in prs:
        if pr.author in users:
            authored.append(pr)
        else:
            non_authored.append(pr)
    return authored, non_authored


def deduplicate(prs: Iterable[PullRequest]) -> List[PullRequest]:
    """Drop repeated PRs (same URL), keeping the first occurrence."""
    seen = set()
    unique = []
    for pr in prs:
        if pr.html_url not in seen:
            seen.add(pr.html_url)
            unique.append(pr)
    return unique
