#!/usr/bin/env python3
"""
Pocket to Omnivore Import Tool
Imports the articles of a Pocket CSV export into Omnivore.

Environment Variables:
    OMNIVORE_API_KEY     Your Omnivore API key (required)
    OMNIVORE_BASE_URL    Base URL for your Omnivore instance (optional)
"""

import argparse
import logging
import sys
from typing import List, Optional

from config import load_config
from csv_parser import read_pocket_csv
from errors import ConfigurationError, CsvReadError, ImportAbortedError
from importer import BatchRunner
from models import ImportOptions
from omnivore_client import OmnivoreClient
from import_progress import ImportProgress, log_final_statistics

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{name} must be an integer")


def non_negative_ms(value: str) -> int:
    """Validate a delay is a whole number of milliseconds, zero or more."""
    ms = _parse_int(value, "Delay")
    if ms < 0:
        raise argparse.ArgumentTypeError("Delay must be at least 0")
    return ms


def positive_ms(value: str) -> int:
    """Validate a timeout is a whole number of milliseconds above zero."""
    ms = _parse_int(value, "Timeout")
    if ms <= 0:
        raise argparse.ArgumentTypeError("Timeout must be at least 1")
    return ms


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import Pocket bookmarks to Omnivore",
        epilog="Environment: OMNIVORE_API_KEY (required), OMNIVORE_BASE_URL (optional)",
    )
    parser.add_argument("csv_file", help="Path to the Pocket CSV export")
    parser.add_argument(
        "--unread-untagged",
        "--unread_untagged",
        dest="unread_untagged",
        action="store_true",
        help="Don't archive articles without tags, even if marked as archived in Pocket",
    )
    parser.add_argument(
        "--delay-ms",
        type=non_negative_ms,
        default=200,
        help="Delay between Omnivore requests in milliseconds (default: 200)",
    )
    parser.add_argument(
        "--url-timeout-ms",
        type=positive_ms,
        default=10000,
        help="Timeout for dead URL checks in milliseconds (default: 10000)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def import_pocket_csv(csv_file: str, options: ImportOptions) -> int:
    """
    Run a full import and return the process exit code.
    """
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        logger.error('Set it with: export OMNIVORE_API_KEY="your-api-key-here"')
        return 1

    logger.info("🚀 Starting Pocket to Omnivore import")
    logger.info(f"Omnivore Base URL: {config.effective_base_url}")
    logger.info(f"CSV File: {csv_file}")
    if options.unread_untagged:
        logger.info(
            "🏷️  Option: --unread-untagged enabled (articles without tags will stay unread)"
        )

    try:
        rows = read_pocket_csv(csv_file)
    except CsvReadError as e:
        logger.error(f"❌ Import failed: {e}")
        return 1

    client = OmnivoreClient(config.api_key, config.base_url)
    progress = ImportProgress(verbose=True)
    runner = BatchRunner(
        save_fn=client.save_article,
        options=options,
        progress_callback=progress.update,
    )

    try:
        stats = runner.run(rows)
    except ImportAbortedError as e:
        progress.abort()
        logger.error(f"❌ Import failed: {e}")
        return 1
    except KeyboardInterrupt:
        progress.abort()
        logger.info("⏹️  Import interrupted by user")
        return 1

    progress.finish()
    log_final_statistics(stats, unread_untagged=options.unread_untagged)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    options = ImportOptions(
        unread_untagged=args.unread_untagged,
        delay_ms=args.delay_ms,
        url_timeout_ms=args.url_timeout_ms,
    )
    return import_pocket_csv(args.csv_file, options)


if __name__ == "__main__":
    sys.exit(main())
