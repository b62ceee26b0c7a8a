#!/usr/bin/env python3
"""
Importer Module for Pocket to Omnivore Importer
Runs every CSV row through validation, URL checking and saving, one at a time.

The run is fail-fast: a row that fails validation or cannot be saved stops
the whole import, with the row details and progress so far attached to the
raised ImportAbortedError. Dead URLs are skipped and the run continues.
"""

import logging
import time
from typing import Callable, List, Optional

from csv_parser import validate_row
from errors import ImportAbortedError, remote_save_error
from models import (
    ImportOptions,
    LivenessResult,
    RawRecord,
    RowOutcome,
    RowSkipped,
    RowSuccess,
    RunStatistics,
    SaveRequest,
    SaveResult,
)
from request_builder import POCKET_ARCHIVE_STATUS, build_save_request, should_archive
from tag_processor import map_tags
from url_checker import check_url_alive

logger = logging.getLogger(__name__)

SaveFunction = Callable[[SaveRequest], SaveResult]
ProbeFunction = Callable[[str, int], LivenessResult]
ProgressCallback = Callable[[int, int, str], None]


class StatisticsTracker:
    """Running counters for one import run."""

    def __init__(self):
        self.total = 0
        self.successful = 0
        self.skipped = 0
        self.tagged = 0
        self.archived = 0
        self.skipped_archive = 0

    def record(self, outcome: RowOutcome) -> None:
        self.total += 1
        if isinstance(outcome, RowSkipped):
            self.skipped += 1
            return

        self.successful += 1
        if outcome.has_labels:
            self.tagged += 1
        if outcome.is_archived:
            self.archived += 1
        if outcome.was_archived_in_pocket and not outcome.is_archived:
            self.skipped_archive += 1

    def snapshot(self) -> RunStatistics:
        return RunStatistics(
            total=self.total,
            successful=self.successful,
            skipped=self.skipped,
            tagged=self.tagged,
            archived=self.archived,
            skipped_archive=self.skipped_archive,
        )


class BatchRunner:
    """Imports Pocket rows into Omnivore sequentially."""

    def __init__(
        self,
        save_fn: SaveFunction,
        options: Optional[ImportOptions] = None,
        probe_fn: ProbeFunction = check_url_alive,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.save_fn = save_fn
        self.options = options or ImportOptions()
        self.probe_fn = probe_fn
        self.progress_callback = progress_callback

    def run(self, rows: List[RawRecord]) -> RunStatistics:
        """
        Process all rows in order.

        Args:
            rows: Raw CSV rows

        Returns:
            Final statistics for the run

        Raises:
            ImportAbortedError: a row failed validation or could not be saved
        """
        stats = StatisticsTracker()
        total_rows = len(rows)

        for index, row in enumerate(rows):
            row_number = index + 1

            if self.progress_callback:
                title = (row.get("title") or "").strip() or "Untitled"
                self.progress_callback(stats.total, total_rows, title)

            try:
                outcome = self.process_row(row_number, row)
            except Exception as e:
                raise self._abort(e, row_number, row, stats.snapshot()) from e

            stats.record(outcome)

            # Pace requests to Omnivore
            if index < total_rows - 1:
                time.sleep(self.options.delay_ms / 1000.0)

        return stats.snapshot()

    def process_row(self, row_number: int, row: RawRecord) -> RowOutcome:
        """
        Process a single row from the CSV.

        Raises:
            RowValidationError: the row has no usable URL
            RemoteSaveError: Omnivore rejected the save or could not be reached
        """
        record = validate_row(row_number, row)

        url_check = self.probe_fn(record.url, self.options.url_timeout_ms)
        if not url_check.is_alive:
            logger.warning(
                f"Row {row_number}: Skipping dead URL ({url_check.reason}): {record.url}"
            )
            return RowSkipped(
                title=record.title, url=record.url, reason=f"Dead URL: {url_check.reason}"
            )

        labels = map_tags(record.tags)
        has_labels = len(labels) > 0
        archive = should_archive(record.status, has_labels, self.options.unread_untagged)

        request = build_save_request(record, labels, archive)

        try:
            result = self.save_fn(request)
        except Exception as e:
            raise remote_save_error(e) from e

        return RowSuccess(
            id=result.id,
            title=record.title,
            url=record.url,
            has_labels=has_labels,
            is_archived=archive,
            was_archived_in_pocket=record.status == POCKET_ARCHIVE_STATUS,
        )

    def _abort(
        self, error: Exception, row_number: int, row: RawRecord, stats: RunStatistics
    ) -> ImportAbortedError:
        aborted = ImportAbortedError(
            row_number,
            error,
            title=(row.get("title") or "").strip(),
            url=(row.get("url") or "").strip(),
            tags=(row.get("tags") or "").strip(),
            status=(row.get("status") or "").strip(),
            statistics=stats,
        )

        logger.error(f"❌ IMPORT STOPPED: {aborted}")
        logger.error(f"Failed at row {row_number}:")
        logger.error(f'  Title: "{aborted.title}"')
        logger.error(f'  URL: "{aborted.url}"')
        logger.error(f'  Tags: "{aborted.tags}"')
        logger.error(f'  Status: "{aborted.status}"')
        logger.error(
            f"Progress before failure: {stats.successful}/{stats.total} "
            f"articles imported successfully"
        )
        return aborted


def run_import(
    rows: List[RawRecord],
    options: ImportOptions,
    save_fn: SaveFunction,
    probe_fn: ProbeFunction = check_url_alive,
    progress_callback: Optional[ProgressCallback] = None,
) -> RunStatistics:
    """
    Convenience function to import rows with a one-off BatchRunner.

    Returns:
        Final RunStatistics
    """
    runner = BatchRunner(
        save_fn=save_fn,
        options=options,
        probe_fn=probe_fn,
        progress_callback=progress_callback,
    )
    return runner.run(rows)
