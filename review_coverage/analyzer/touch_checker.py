"""Detection of PRs that tracked users reviewed or commented on."""

import logging
from typing import AbstractSet, Dict, Iterable, Iterator, List, Optional

from ..api_client import GitHubAPIClient
from ..models import PullRequest, actor_login
from ..worker_pool import WorkerPool


def _any_actor_in(pages: Iterator[List[Dict]], users: AbstractSet[str]) -> Optional[str]:
    """Scan pages of reviews or comments for a tracked actor.

    Stops fetching as soon as a match is found.

    Returns:
        The matching login, or None if no page contains one
    """
    for page in pages:
        for item in page:
            login = actor_login(item)
            if login is not None and login in users:
                return login
    return None


class TouchChecker:
    """Finds PRs that any tracked user reviewed or commented on."""

    def __init__(self, api_client: GitHubAPIClient, users: AbstractSet[str], pool: WorkerPool):
        """Initialize the checker.

        Args:
            api_client: Client used to list reviews and comments
            users: Tracked logins
            pool: Worker pool the checks run on
        """
        self.api_client = api_client
        self.users = users
        self.pool = pool

    def reviewed_by(self, pr: PullRequest) -> Optional[str]:
        """Return a tracked user who left a review on the PR, if any."""
        return _any_actor_in(self.api_client.list_reviews(pr), self.users)

    def commented_on_by(self, pr: PullRequest) -> Optional[str]:
        """Return a tracked user who left an issue comment on the PR, if any."""
        return _any_actor_in(self.api_client.list_issue_comments(pr), self.users)

    def is_touched(self, pr: PullRequest) -> bool:
        """Check whether a tracked user reviewed or commented on a PR.

        Reviews are checked first; comments are only fetched if no tracked
        user reviewed the PR.
        """
        reviewer = self.reviewed_by(pr)
        if reviewer is not None:
            logging.debug(f"PR #{pr.number} in {pr.base_repo} reviewed by {reviewer}")
            return True

        commenter = self.commented_on_by(pr)
        if commenter is not None:
            logging.debug(f"PR #{pr.number} in {pr.base_repo} commented on by {commenter}")
            return True

        return False

    def _check(self, pr: PullRequest) -> Optional[PullRequest]:
        return pr if self.is_touched(pr) else None

    def filter_touched(self, prs: Iterable[PullRequest]) -> List[PullRequest]:
        """Return the PRs that a tracked user reviewed or commented on.

        Checks run concurrently on the worker pool, so the result is not
        guaranteed to follow input order.

        Args:
            prs: Candidate PRs (normally those not authored by tracked users)

        Returns:
            The touched subset of prs
        """
        prs = list(prs)
        results = self.pool.map_unordered(self._check, prs, description="Checking reviews")
        touched = [pr for pr in results if pr is not None]
        logging.info(f"{len(touched)} of {len(prs)} PRs were reviewed or commented on by tracked users")
        return touched
