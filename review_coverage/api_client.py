"""GitHub API client for making rate-limited, retried paginated requests."""

import time
import logging
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional, Tuple, TypeVar
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import DEFAULT_API_URL, DEFAULT_MAX_RETRIES, DEFAULT_REQUEST_DELAY_MS
from .models import PullRequest

T = TypeVar('T')

PER_PAGE = 100


def retry_list_up_to(retries: int, fetch: Callable[[], T], delay: float,
                     sleep: Callable[[float], None] = time.sleep) -> T:
    """Call fetch, retrying failures up to ``retries`` more times.

    Sleeps ``delay`` seconds after every attempt, successful or not, to stay
    under the API rate limit. Any exception counts as a failure.

    Args:
        retries: Number of retries after the first attempt
        fetch: Zero-argument callable performing one request
        delay: Seconds to sleep after each attempt
        sleep: Sleep function (injectable for tests)

    Returns:
        The result of the first successful call

    Raises:
        Exception: The last error once retries are exhausted
    """
    attempt = 0
    while True:
        try:
            result = fetch()
        except Exception as e:
            sleep(delay)
            if attempt >= retries:
                logging.error(f"Giving up after {attempt + 1} attempt(s): {e}")
                raise
            attempt += 1
            logging.warning(f"Request failed ({e}), retry {attempt}/{retries}")
            continue
        sleep(delay)
        return result


class GitHubAPIClient:
    """Handles GitHub API requests with fixed-delay retries and pagination."""

    def __init__(self, token: str = None, api_url: str = DEFAULT_API_URL,
                 request_delay: float = DEFAULT_REQUEST_DELAY_MS / 1000,
                 max_retries: int = DEFAULT_MAX_RETRIES, pool_size: int = 10,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the GitHub API client.

        Args:
            token: GitHub OAuth/personal access token
            api_url: Base URL of the REST API
            request_delay: Seconds to sleep after every request
            max_retries: Retries per page before giving up
            pool_size: Expected number of concurrent callers
            sleep: Sleep function (injectable for tests)
        """
        self.token = token
        self.api_url = api_url.rstrip('/')
        self.request_delay = request_delay
        self.max_retries = max_retries
        self._sleep = sleep
        self.session = requests.Session()

        # No transport-level retries: every attempt goes through
        # retry_list_up_to so each one is followed by the fixed delay
        adapter = HTTPAdapter(
            pool_connections=pool_size,
            pool_maxsize=pool_size,
            max_retries=Retry(total=0, raise_on_status=False)
        )
        self.session.mount('https://', adapter)
        self.session.mount('http://', adapter)
        self.session.headers.update({'Accept': 'application/vnd.github.v3+json'})

        if self.token:
            self.session.headers.update({'Authorization': f'Bearer {self.token}'})
            logging.info("Initialized GitHub API client with token")
        else:
            logging.warning("No GitHub token provided. Rate limits will be much lower.")
            logging.warning("Set GITHUB_TOKEN_FILE to a file containing a token.")

    def _fetch_page(self, url: str, params: Dict) -> Tuple[List[Dict], bool]:
        """Fetch a single page.

        Returns:
            Tuple of (items, has_next_page)
        """
        response = self.session.get(url, params=params)
        response.raise_for_status()
        return response.json(), 'next' in response.links

    def iter_pages(self, url: str, params: Dict = None) -> Iterator[List[Dict]]:
        """Yield the items of every page of a paginated endpoint in order.

        Each page is fetched through retry_list_up_to; stopping iteration early
        skips the remaining requests.

        Args:
            url: The API endpoint URL
            params: Query parameters

        Yields:
            The list of items on each page
        """
        base_params = dict(params or {})
        base_params['per_page'] = PER_PAGE
        page = 1

        while True:
            page_params = dict(base_params, page=page)
            logging.debug(f"Fetching page {page} from {url}")
            items, has_next = retry_list_up_to(
                self.max_retries,
                lambda: self._fetch_page(url, page_params),
                self.request_delay,
                sleep=self._sleep
            )
            yield items
            if not has_next:
                return
            page += 1

    def get_paginated(self, url: str, params: Dict = None,
                      should_continue: Optional[Callable[[List[Dict]], bool]] = None) -> List[Dict]:
        """Fetch all pages of a paginated GitHub API endpoint.

        Args:
            url: The API endpoint URL
            params: Query parameters
            should_continue: Optional callback function that takes a page of results and returns
                           False to stop pagination early, True to continue

        Returns:
            List of all items from all pages
        """
        results = []
        for items in self.iter_pages(url, params):
            results.extend(items)
            if should_continue and not should_continue(items):
                logging.debug(f"Early termination triggered for {url}")
                break

        logging.debug(f"Fetched {len(results)} total items from {url}")
        return results

    def repo_url(self, owner: str, repo: str) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}"

    def list_pull_requests(self, owner: str, repo: str,
                           since: Optional[datetime] = None) -> List[PullRequest]:
        """List pull requests of a repository, most recently updated first.

        Args:
            owner: Repository owner
            repo: Repository name
            since: If given, stop paging once a page ends with a pull request
                   updated before this instant (later pages are older still)

        Returns:
            List of PullRequest values
        """
        def updated_since(page: List[Dict]) -> bool:
            if since is None or not page:
                return True
            return PullRequest.from_api(page[-1]).updated_at >= since

        data = self.get_paginated(f"{self.repo_url(owner, repo)}/pulls", {
            'state': 'all',
            'sort': 'updated',
            'direction': 'desc'
        }, should_continue=updated_since)
        return [PullRequest.from_api(item) for item in data]

    def list_reviews(self, pr: PullRequest) -> Iterator[List[Dict]]:
        """Iterate over the review pages of a pull request."""
        url = f"{self.repo_url(pr.base_owner, pr.base_repo)}/pulls/{pr.number}/reviews"
        return self.iter_pages(url)

    def list_issue_comments(self, pr: PullRequest) -> Iterator[List[Dict]]:
        """Iterate over the issue comment pages of a pull request."""
        url = f"{self.repo_url(pr.base_owner, pr.base_repo)}/issues/{pr.number}/comments"
        return self.iter_pages(url)

    def list_files(self, pr: PullRequest) -> Iterator[List[Dict]]:
        """Iterate over the changed-file pages of a pull request."""
        url = f"{self.repo_url(pr.base_owner, pr.base_repo)}/pulls/{pr.number}/files"
        return self.iter_pages(url)
