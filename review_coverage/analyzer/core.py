"""Main review coverage analyzer."""

import logging
from typing import List

from ..api_client import GitHubAPIClient
from ..cache import LineCountCache
from ..config import Repository, ReviewCoverageConfig
from ..file_filters import FileFilter
from ..models import CoverageReport, PullRequest
from ..worker_pool import WorkerPool
from .line_counter import LineCounter
from .pr_filtering import deduplicate, filter_by_time, partition_by_author
from .touch_checker import TouchChecker


class ReviewCoverageAnalyzer:
    """Measures how much of the code added in a window tracked users wrote or reviewed."""

    def __init__(self, config: ReviewCoverageConfig, api_client: GitHubAPIClient = None):
        """Initialize the analyzer.

        Args:
            config: Run configuration
            api_client: Client to use instead of one built from the configuration
        """
        self.config = config
        self.api_client = api_client or GitHubAPIClient(
            config.token,
            api_url=config.api_url,
            request_delay=config.request_delay,
            max_retries=config.max_retries,
            pool_size=config.workers
        )
        self.cache = LineCountCache()
        self.file_filter = FileFilter(config.excluded_file_patterns)

        logging.info(f"Initialized analyzer for {len(config.users)} tracked user(s) "
                     f"across {len(config.repositories)} repository/repositories")

    def list_pull_requests(self) -> List[PullRequest]:
        """Fetch the PRs of every configured repository that may fall in the window."""
        prs = []
        for repository in self.config.repositories:
            print(f"Fetching pull requests from {repository.full_name}...", end='', flush=True)
            repo_prs = self._list_repository(repository)
            print(f" fetched {len(repo_prs)} PRs")
            prs.extend(repo_prs)
        return deduplicate(prs)

    def _list_repository(self, repository: Repository) -> List[PullRequest]:
        return self.api_client.list_pull_requests(
            repository.owner, repository.name, since=self.config.start
        )

    def run(self) -> CoverageReport:
        """Run every phase and build the report.

        Returns:
            CoverageReport for the configured window

        Raises:
            Exception: Any unrecovered API error; no partial report is produced
        """
        config = self.config
        logging.info(f"Searching for PRs between {config.start:%m-%d-%Y} and {config.end:%m-%d-%Y}")

        prs = self.list_pull_requests()
        logging.info(f"Finished listing PRs: {len(prs)}")

        in_window = filter_by_time(prs, config.start, config.end)
        logging.info(f"Finished filtering PRs for time: {len(in_window)}")

        authored, non_authored = partition_by_author(in_window, config.users)
        logging.info(f"Finished filtering PRs for authors: {len(authored)} authored, "
                     f"{len(non_authored)} by others")

        with WorkerPool(config.workers) as pool:
            touch_checker = TouchChecker(self.api_client, config.users, pool)
            line_counter = LineCounter(self.api_client, pool, self.file_filter, self.cache)

            print(f"Checking {len(non_authored)} PRs for reviews and comments...")
            touched = touch_checker.filter_touched(non_authored)

            print(f"Counting added lines in {len(in_window)} PRs...")
            authored_lines = line_counter.count_lines_added(authored, description="Authored PRs")
            non_authored_lines = line_counter.count_lines_added(non_authored, description="Other PRs")
            # Every touched PR was counted above, so these are cache hits
            touched_lines = line_counter.count_lines_added(touched)

        logging.info(f"Line count cache: {self.cache.hits} hit(s), {self.cache.misses} miss(es)")

        return CoverageReport(
            total_prs=len(in_window),
            authored_prs=len(authored),
            non_authored_prs=len(non_authored),
            touched_prs=len(touched),
            total_lines_added=authored_lines + non_authored_lines,
            authored_lines_added=authored_lines,
            non_authored_lines_added=non_authored_lines,
            touched_lines_added=touched_lines,
        )
