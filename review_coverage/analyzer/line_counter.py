"""Counting of added lines per PR, memoized across the run."""

import logging
from typing import Iterable

from ..api_client import GitHubAPIClient
from ..cache import LineCountCache
from ..file_filters import FileFilter
from ..models import PullRequest
from ..worker_pool import WorkerPool


class LineCounter:
    """Sums non-vendored added lines for PRs, caching each PR's count."""

    def __init__(self, api_client: GitHubAPIClient, pool: WorkerPool,
                 file_filter: FileFilter = None, cache: LineCountCache = None):
        self.api_client = api_client
        self.pool = pool
        self.file_filter = file_filter or FileFilter()
        self.cache = cache if cache is not None else LineCountCache()

    def _fetch_additions(self, pr: PullRequest) -> int:
        additions = 0
        for page in self.api_client.list_files(pr):
            additions += self.file_filter.count_additions(page)
        logging.debug(f"PR #{pr.number} in {pr.base_repo}: +{additions:,} lines")
        return additions

    def count_pr(self, pr: PullRequest) -> int:
        """Added lines of one PR outside excluded files.

        Args:
            pr: The PR to count

        Returns:
            Added line count, fetched at most once per PR URL
        """
        return self.cache.get_or_compute(pr.html_url, lambda: self._fetch_additions(pr))

    def count_lines_added(self, prs: Iterable[PullRequest], description: str = None) -> int:
        """Total added lines across a set of PRs.

        Args:
            prs: PRs to count
            description: Label for progress output

        Returns:
            Sum of the per-PR counts
        """
        counts = self.pool.map_unordered(self.count_pr, prs, description=description)
        return sum(counts)
