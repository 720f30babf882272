"""
Unit tests for OutputFormatter
"""

import pytest
from datetime import datetime, timezone

from review_coverage.config import Repository, ReviewCoverageConfig
from review_coverage.models import CoverageReport
from review_coverage.output import GREEN, YELLOW, OutputFormatter, format_percent


@pytest.fixture
def config():
    return ReviewCoverageConfig(
        repositories=(Repository('knative', 'serving'), Repository('knative', 'eventing')),
        users=frozenset({'bob', 'alice'}),
        start=datetime(2024, 3, 1, tzinfo=timezone.utc),
        end=datetime(2024, 4, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def report():
    return CoverageReport(
        total_prs=10,
        authored_prs=4,
        non_authored_prs=6,
        touched_prs=3,
        total_lines_added=2000,
        authored_lines_added=800,
        non_authored_lines_added=1200,
        touched_lines_added=300,
    )


class TestFormatPercent:
    """Test cases for percentage rendering."""

    def test_ratio(self):
        assert format_percent(0.25) == "25.0%"

    def test_undefined(self):
        assert format_percent(None) == "n/a"


class TestPrintSummary:
    """Test cases for the printed summary."""

    def test_header_and_settings(self, config, report, capsys):
        """Test that the run settings are echoed."""
        OutputFormatter(config, use_color=False).print_summary(report)
        output = capsys.readouterr().out

        assert "REVIEW COVERAGE SUMMARY" in output
        assert "alice, bob" in output
        assert "knative/serving, knative/eventing" in output
        assert "03-01-2024 - 04-01-2024" in output

    def test_counts_and_lines(self, config, report, capsys):
        """Test that every set is listed with its line total."""
        OutputFormatter(config, use_color=False).print_summary(report)
        output = capsys.readouterr().out

        assert "2,000" in output
        assert "1,200" in output
        assert "Authored by tracked users" in output
        assert "reviewed/commented" in output

    def test_percentages(self, config, report, capsys):
        """Test the derived coverage percentages."""
        OutputFormatter(config, use_color=False).print_summary(report)
        output = capsys.readouterr().out

        assert "40.0%" in output
        assert "25.0%" in output
        assert "55.0%" in output
        assert "\033[" not in output

    def test_colors(self, config, report, capsys):
        """Test that ratios are colored by level when enabled."""
        OutputFormatter(config, use_color=True).print_summary(report)
        output = capsys.readouterr().out

        assert f"{GREEN}55.0%" in output
        assert f"{YELLOW}40.0%" in output

    def test_empty_report(self, config, capsys):
        """Test the message when nothing was found."""
        OutputFormatter(config, use_color=False).print_summary(CoverageReport())
        output = capsys.readouterr().out

        assert "No pull requests found in the window." in output
        assert "COVERAGE\n" not in output


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
