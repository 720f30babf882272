#!/usr/bin/env python3
"""
Review Coverage
Measures how much of the code added to a set of repositories was written or
reviewed by a set of tracked users.
"""

import os
import sys
import logging
from dotenv import load_dotenv

from review_coverage.analyzer.core import ReviewCoverageAnalyzer
from review_coverage.config import ConfigurationError, describe, load_config
from review_coverage.output import OutputFormatter

# Configure logging (can be overridden by LOG_LEVEL environment variable)
log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format='%(asctime)s %(levelname)s: %(message)s',
    datefmt='%m/%d/%Y %I:%M:%S %p'
)


def main() -> int:
    """Main entry point for the script."""
    # Load environment variables from .env file if it exists
    load_dotenv()

    print("Review Coverage")
    print("="*80)

    try:
        config = load_config()
    except ConfigurationError as e:
        logging.error(str(e))
        return 1

    for key, value in describe(config).items():
        logging.info(f"{key}: {value}")

    analyzer = ReviewCoverageAnalyzer(config)
    try:
        report = analyzer.run()
    except Exception as e:
        logging.error(f"Analysis aborted: {e}", exc_info=True)
        return 1

    OutputFormatter(config, use_color=sys.stdout.isatty()).print_summary(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
