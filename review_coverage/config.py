"""
Run configuration for the review coverage analyzer.

Settings are read once at startup from environment variables (a .env file is
honoured by the entry script) and frozen into a ReviewCoverageConfig that is
passed to every component.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, FrozenSet, Mapping, Optional, Tuple

DATE_FORMAT = '%m-%d-%Y'  # M-D-YYYY, leading zeros optional
DEFAULT_OWNER = 'knative'
DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_WORKERS = 3
DEFAULT_REQUEST_DELAY_MS = 750
DEFAULT_MAX_RETRIES = 5


class ConfigurationError(Exception):
    """Raised when the run configuration is invalid or incomplete."""


@dataclass(frozen=True)
class Repository:
    """A repository to scan."""
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class ReviewCoverageConfig:
    """Immutable settings for one analysis run."""
    repositories: Tuple[Repository, ...]
    users: FrozenSet[str]
    start: datetime
    end: datetime
    token: Optional[str] = None
    workers: int = DEFAULT_WORKERS
    request_delay: float = DEFAULT_REQUEST_DELAY_MS / 1000
    max_retries: int = DEFAULT_MAX_RETRIES
    api_url: str = DEFAULT_API_URL
    excluded_file_patterns: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.repositories:
            raise ConfigurationError("At least one repository is required")
        if not self.users:
            raise ConfigurationError("At least one tracked user is required")
        if self.start > self.end:
            raise ConfigurationError(
                f"Start date {self.start:%m-%d-%Y} is after end date {self.end:%m-%d-%Y}"
            )
        if self.workers < 1:
            raise ConfigurationError(f"Worker count must be positive, got {self.workers}")
        if self.max_retries < 0:
            raise ConfigurationError(f"Retry count must not be negative, got {self.max_retries}")
        if self.request_delay < 0:
            raise ConfigurationError(f"Request delay must not be negative, got {self.request_delay}")


def parse_date(value: str) -> datetime:
    """Parse an M-D-YYYY date as midnight UTC.

    Raises:
        ConfigurationError: If the value does not match the format
    """
    try:
        parsed = datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError as e:
        raise ConfigurationError(f"Unable to parse date '{value}': {e}") from e
    return parsed.replace(tzinfo=timezone.utc)


def read_token_file(path: str) -> str:
    """Read an API token from a file, dropping one trailing newline.

    Raises:
        ConfigurationError: If the file cannot be read or holds no token
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        raise ConfigurationError(f"Unable to read token file '{path}': {e}") from e
    if content.endswith('\n'):
        content = content[:-1]
    if not content.strip():
        raise ConfigurationError(f"Token file '{path}' is empty")
    return content


def split_list(value: str) -> list:
    """Split a comma-separated setting, dropping blanks."""
    return [item.strip() for item in value.split(',') if item.strip()]


def parse_repositories(names, default_owner: str) -> Tuple[Repository, ...]:
    """Turn repository names into Repository values.

    A name of the form ``owner/repo`` overrides the default owner.
    """
    repositories = []
    for name in names:
        if '/' in name:
            owner, _, repo = name.partition('/')
            if not owner or not repo or '/' in repo:
                raise ConfigurationError(f"Invalid repository name '{name}'")
            repositories.append(Repository(owner, repo))
        else:
            repositories.append(Repository(default_owner, name))
    return tuple(repositories)


def _parse_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {key} value '{raw}': expected an integer") from e


def _prompt_list(prompt: Callable[[str], str], message: str) -> list:
    """Ask for a comma-separated list on stdin."""
    return split_list(prompt(message))


def load_config(environ: Mapping[str, str] = None,
                prompt: Optional[Callable[[str], str]] = input,
                today: datetime = None) -> ReviewCoverageConfig:
    """Build the run configuration from environment variables.

    Args:
        environ: Variables to read (defaults to os.environ)
        prompt: Callback used to ask for missing repositories and users,
                or None to fail instead of prompting
        today: Reference date for the start/end defaults

    Returns:
        ReviewCoverageConfig instance

    Raises:
        ConfigurationError: If any setting is missing or invalid
    """
    if environ is None:
        environ = os.environ
    if today is None:
        today = datetime.now(timezone.utc)
    default_date = today.strftime(DATE_FORMAT)

    owner = environ.get('GITHUB_OWNER', '').strip() or DEFAULT_OWNER

    repo_names = split_list(environ.get('GITHUB_REPOS', ''))
    if not repo_names and prompt is not None:
        repo_names = _prompt_list(prompt, f"\nEnter repositories of '{owner}' (comma-separated): ")
    if repo_names:
        logging.info(f"Using repositories: {', '.join(repo_names)}")

    users = split_list(environ.get('TRACKED_USERS', ''))
    if not users and prompt is not None:
        users = _prompt_list(prompt, "\nEnter GitHub users to track (comma-separated): ")
    if users:
        logging.info(f"Tracking users: {', '.join(users)}")

    start = parse_date(environ.get('START_DATE', '').strip() or default_date)
    end = parse_date(environ.get('END_DATE', '').strip() or default_date)

    token = None
    token_file = environ.get('GITHUB_TOKEN_FILE', '').strip()
    if token_file:
        token = read_token_file(token_file)
    else:
        # Fall back to a token passed directly in the environment
        token = environ.get('GITHUB_TOKEN') or None

    delay_ms = _parse_int(environ, 'REQUEST_DELAY_MS', DEFAULT_REQUEST_DELAY_MS)

    patterns = tuple(split_list(environ.get('EXCLUDED_FILE_PATTERNS', '')))
    if patterns:
        logging.info(f"Using custom excluded file patterns: {', '.join(patterns)}")

    return ReviewCoverageConfig(
        repositories=parse_repositories(repo_names, owner),
        users=frozenset(users),
        start=start,
        end=end,
        token=token,
        workers=_parse_int(environ, 'PARALLEL_WORKERS', DEFAULT_WORKERS),
        request_delay=delay_ms / 1000,
        max_retries=_parse_int(environ, 'MAX_RETRIES', DEFAULT_MAX_RETRIES),
        api_url=(environ.get('GITHUB_API_URL', '').strip() or DEFAULT_API_URL).rstrip('/'),
        excluded_file_patterns=patterns,
    )


def describe(config: ReviewCoverageConfig) -> Dict[str, str]:
    """Summarize the configuration for logging."""
    return {
        'repositories': ', '.join(r.full_name for r in config.repositories),
        'users': ', '.join(sorted(config.users)),
        'window': f"{config.start:%m-%d-%Y} - {config.end:%m-%d-%Y}",
        'workers': str(config.workers),
    }
