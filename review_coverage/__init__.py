"""Review Coverage - measures how much added code tracked users wrote or reviewed."""

from .models import PullRequest, ChangedFile, CoverageReport
from .config import ReviewCoverageConfig, Repository, ConfigurationError, load_config
from .api_client import GitHubAPIClient, retry_list_up_to
from .cache import LineCountCache
from .file_filters import FileFilter, is_vendored
from .worker_pool import WorkerPool
from .analyzer.core import ReviewCoverageAnalyzer
from .output import OutputFormatter

__all__ = [
    'PullRequest',
    'ChangedFile',
    'CoverageReport',
    'ReviewCoverageConfig',
    'Repository',
    'ConfigurationError',
    'load_config',
    'GitHubAPIClient',
    'retry_list_up_to',
    'LineCountCache',
    'FileFilter',
    'is_vendored',
    'WorkerPool',
    'ReviewCoverageAnalyzer',
    'OutputFormatter',
]
