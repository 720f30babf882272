"""Output formatting and display for review coverage results."""

from typing import Optional

from .config import ReviewCoverageConfig
from .models import CoverageReport


# ANSI color codes
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
CYAN = '\033[96m'
BOLD = '\033[1m'
RESET = '\033[0m'


def format_percent(ratio: Optional[float]) -> str:
    """Render a ratio as a percentage, or n/a when undefined."""
    if ratio is None:
        return "n/a"
    return f"{ratio * 100:.1f}%"


class OutputFormatter:
    """Formats and prints review coverage results."""

    def __init__(self, config: ReviewCoverageConfig, use_color: bool = True):
        """Initialize the output formatter.

        Args:
            config: The configuration the report was produced with
            use_color: Whether to emit ANSI color codes
        """
        self.config = config
        self.use_color = use_color

    def _color_for(self, ratio: Optional[float]) -> str:
        if not self.use_color or ratio is None:
            return ''
        if ratio >= 0.5:
            return GREEN
        if ratio >= 0.2:
            return YELLOW
        return RED

    def _paint(self, text: str, color: str) -> str:
        if not self.use_color or not color:
            return text
        return f"{color}{text}{RESET}"

    def print_summary(self, report: CoverageReport):
        """Print the coverage summary.

        Args:
            report: Results of the analysis run
        """
        config = self.config
        print("\n" + "="*80)
        print(self._paint("REVIEW COVERAGE SUMMARY", BOLD))
        print("="*80)
        print(f"Users:        {', '.join(sorted(config.users))}")
        print(f"Repositories: {', '.join(r.full_name for r in config.repositories)}")
        print(f"Window:       {config.start:%m-%d-%Y} - {config.end:%m-%d-%Y}")

        if report.total_prs == 0:
            print("\nNo pull requests found in the window.")
            return

        print(f"\n{'Pull requests':<30} {'Count':>10} {'+lines':>14}")
        print(f"{'-'*56}")
        print(f"{'All in window':<30} {report.total_prs:>10,} {report.total_lines_added:>14,}")
        print(f"{'Authored by tracked users':<30} {report.authored_prs:>10,} {report.authored_lines_added:>14,}")
        print(f"{'Authored by others':<30} {report.non_authored_prs:>10,} {report.non_authored_lines_added:>14,}")
        print(f"{'  reviewed/commented':<30} {report.touched_prs:>10,} {report.touched_lines_added:>14,}")

        print(f"\n{'='*80}")
        print("COVERAGE")
        print(f"{'='*80}")
        for label, ratio in [
            ("Lines authored by tracked users", report.authored_ratio),
            ("Lines of others reviewed", report.reviewed_ratio),
            ("Lines authored or reviewed", report.participation_ratio),
        ]:
            percent = self._paint(format_percent(ratio), self._color_for(ratio))
            print(f"{label:<36} {percent}")
