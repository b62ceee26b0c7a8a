#!/usr/bin/env python3
"""
Progress display and final statistics reporting for the importer.
"""

import logging
import sys
import time
from typing import Optional, TextIO

from models import RunStatistics

logger = logging.getLogger(__name__)


class ImportProgress:
    """Track and display import progress in real-time."""

    def __init__(self, verbose: bool = True, stream: Optional[TextIO] = None, bar_width: int = 30):
        self.start_time = time.time()
        self.verbose = verbose
        self.stream = stream or sys.stdout
        self.bar_width = bar_width
        self.current = 0
        self.total = 0

    def update(self, current: int, total: int, title: str = "") -> None:
        """Progress callback: `current` rows done out of `total`, working on `title`."""
        self.current = current
        self.total = total

        if not self.verbose:
            return

        if not self.stream.isatty():
            # Plain log line every few rows when output is redirected
            if current % 5 == 0:
                self.stream.write(f"Progress: {current}/{total} articles processed\n")
            return

        self._display_status(f"Processing: {title}" if title else "")

    def _display_status(self, label: str) -> None:
        percentage = round(self.current / self.total * 100) if self.total else 100
        label = label if len(label) <= 50 else f"{label[:47]}..."

        self.stream.write(
            f"\r🔄 {self.create_progress_bar(self.current, self.total, self.bar_width)} "
            f"{percentage}% ({self.current}/{self.total}) {label}" + " " * 10
        )
        self.stream.flush()

    @staticmethod
    def create_progress_bar(current: int, total: int, width: int = 30) -> str:
        filled = round(current / total * width) if total else width
        return "█" * filled + "░" * (width - filled)

    def _format_time(self, seconds: float) -> str:
        """Format time in human-readable format."""
        if seconds < 60:
            return f"{seconds:.0f}s"
        elif seconds < 3600:
            minutes = seconds / 60
            return f"{minutes:.0f}m"
        else:
            hours = seconds / 3600
            return f"{hours:.1f}h"

    def finish(self) -> None:
        """Report the final row count and move off the progress line."""
        if not self.verbose:
            return

        self.current = self.total
        if self.stream.isatty():
            self._display_status("Import completed!")
            self.stream.write("\n")
        else:
            self.stream.write(f"Progress: {self.total}/{self.total} articles processed\n")
        total_time = time.time() - self.start_time
        self.stream.write(f"✅ Finished in {self._format_time(total_time)}\n")
        self.stream.flush()

    def abort(self) -> None:
        """Leave the progress line so error output starts on a fresh one."""
        if self.verbose and self.stream.isatty():
            self.stream.write("\n")
            self.stream.flush()


def log_final_statistics(stats: RunStatistics, unread_untagged: bool = False) -> None:
    """Log the summary of a completed import."""
    logger.info("🎉 Import completed successfully!")
    logger.info("📊 Final Statistics:")
    logger.info(f"  ✅ Total articles processed: {stats.successful}/{stats.total}")

    if stats.skipped > 0:
        logger.info(f"  ⏭️  Articles skipped (dead URLs): {stats.skipped}")

    logger.info(f"  🏷️  Articles with tags: {stats.tagged}")
    logger.info(f"  📦 Articles archived: {stats.archived}")
    logger.info(f"  📖 Articles kept unread: {stats.successful - stats.archived}")

    if unread_untagged and stats.skipped_archive > 0:
        logger.info(f"  ⏭️  Archived→Unread (untagged): {stats.skipped_archive}")
