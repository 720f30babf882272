"""File filtering utilities for excluding vendored files from line counts."""

import fnmatch
import logging
from typing import Dict, Iterable, List, Sequence

from .models import ChangedFile

VENDOR_PREFIX = 'vendor/'
VENDOR_SEGMENT = '/vendor/'


def is_vendored(filename: str) -> bool:
    """Check whether a path lies inside a vendor directory.

    Matches a leading ``vendor/`` or a ``/vendor/`` path segment, so
    ``pkg/vendor/x.go`` is vendored but ``vendored.go`` is not.
    """
    return filename.startswith(VENDOR_PREFIX) or VENDOR_SEGMENT in filename


class FileFilter:
    """Decides which changed files count towards added lines."""

    def __init__(self, excluded_file_patterns: Sequence[str] = None):
        """Initialize the file filter.

        Args:
            excluded_file_patterns: Extra fnmatch patterns to exclude on top of vendored paths
        """
        self.excluded_file_patterns = list(excluded_file_patterns or [])

    def match_pattern(self, filename: str, pattern: str) -> bool:
        """Check if a filename matches a pattern (supports * wildcards)."""
        return fnmatch.fnmatch(filename, pattern)

    def is_excluded(self, filename: str) -> bool:
        """Check if a file should be left out of the line count.

        Args:
            filename: The path reported by the files endpoint

        Returns:
            True if the file is vendored or matches an excluded pattern
        """
        if is_vendored(filename):
            return True
        return any(
            self.match_pattern(filename, pattern)
            for pattern in self.excluded_file_patterns
        )

    def count_additions(self, files: Iterable[Dict]) -> int:
        """Sum the additions of all files that are not excluded.

        Args:
            files: File objects from the GitHub API

        Returns:
            Added lines outside excluded files
        """
        additions = 0
        excluded: List[str] = []

        for file in map(ChangedFile.from_api, files):
            if self.is_excluded(file.filename):
                excluded.append(file.filename)
                logging.debug(f"Excluding file: {file.filename} (+{file.additions})")
            else:
                additions += file.additions

        if excluded:
            logging.debug(f"Excluded {len(excluded)} file(s) from line count")

        return additions
