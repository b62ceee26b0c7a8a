#!/usr/bin/env python3
"""
CSV Parser Module for Pocket to Omnivore Importer
Reads Pocket's CSV export and validates individual rows before import.
"""

import csv
import ipaddress
import logging
import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

from errors import CsvReadError, EmptyUrlError, InvalidUrlFormatError
from models import RawRecord, ValidatedRecord

logger = logging.getLogger(__name__)

ROW_FIELDS = ["title", "url", "time_added", "tags", "status"]

# Characters that may not appear in a host name (controls, space and URL delimiters)
FORBIDDEN_HOST_CHARS = re.compile(r"[\x00-\x20\x7f#%/:<>?@\[\\\]^|]")


class PocketCSVParser:
    """Parse Pocket's CSV export into raw row dictionaries."""

    def __init__(self, csv_file_path: str):
        self.csv_file_path = csv_file_path
        # Column layout of the CSV Pocket generates on export
        self.expected_columns = ROW_FIELDS

    def parse_csv(self) -> List[RawRecord]:
        """
        Parse Pocket's CSV export format.

        Returns:
            List of rows (header name -> trimmed value), blank lines skipped
        """
        rows = []

        try:
            with open(self.csv_file_path, "r", encoding="utf-8-sig", newline="") as file:
                reader = csv.DictReader(file, restval="")

                if reader.fieldnames is None:
                    logger.info("CSV file is empty")
                    return rows

                self._check_csv_structure(reader.fieldnames)

                for row in reader:
                    cleaned = self._clean_row(row)
                    if any(cleaned.values()):
                        rows.append(cleaned)

        except FileNotFoundError:
            logger.error(f"CSV file not found: {self.csv_file_path}")
            raise CsvReadError(f"CSV file not found: {self.csv_file_path}")
        except (csv.Error, UnicodeDecodeError) as e:
            logger.error(f"Error parsing CSV file: {e}")
            raise CsvReadError(f"Error parsing CSV file: {e}") from e
        except OSError as e:
            logger.error(f"Error reading CSV file: {e}")
            raise CsvReadError(f"File reading error: {e}") from e

        logger.info(f"Found {len(rows)} rows in CSV file")
        return rows

    def _check_csv_structure(self, fieldnames: List[str]) -> bool:
        """Warn when the header lacks any of the expected Pocket export columns."""
        missing = [col for col in self.expected_columns if col not in fieldnames]
        if missing:
            logger.warning(f"CSV is missing expected columns: {', '.join(missing)}")
            return False
        return True

    def _clean_row(self, row: Dict[Optional[str], object]) -> RawRecord:
        # DictReader stores surplus values under the None key
        return {
            key.strip(): (value or "").strip()
            for key, value in row.items()
            if key is not None and isinstance(value, (str, type(None)))
        }


def validate_row(row_number: int, row: RawRecord) -> ValidatedRecord:
    """
    Validate and clean a single CSV row.

    Args:
        row_number: 1-based position of the row, used in error messages
        row: Raw row from the CSV reader

    Returns:
        ValidatedRecord with every field trimmed

    Raises:
        EmptyUrlError: the url column is missing or blank
        InvalidUrlFormatError: the url is not an absolute URL
    """
    title, url, time_added, tags, status = ((row.get(name) or "").strip() for name in ROW_FIELDS)

    if not url:
        raise EmptyUrlError(row_number)

    _check_absolute_url(row_number, url)

    return ValidatedRecord(
        title=title,
        url=url,
        time_added=time_added,
        tags=tags,
        status=status,
    )


def _check_absolute_url(row_number: int, url: str) -> None:
    try:
        parsed = urlparse(url)
        # Accessing .port validates it
        parsed.port
    except ValueError as e:
        raise InvalidUrlFormatError(row_number, url, str(e)) from e

    if not parsed.scheme:
        raise InvalidUrlFormatError(row_number, url, "missing scheme")
    if not parsed.netloc or not parsed.hostname:
        raise InvalidUrlFormatError(row_number, url, "missing host")

    host = parsed.hostname
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise InvalidUrlFormatError(row_number, url, str(e)) from e
    elif FORBIDDEN_HOST_CHARS.search(host):
        raise InvalidUrlFormatError(row_number, url, f"invalid host: {host}")


def read_pocket_csv(csv_file_path: str) -> List[RawRecord]:
    """
    Convenience function to read a Pocket CSV export.

    Args:
        csv_file_path: Path to the CSV file

    Returns:
        List of raw rows
    """
    parser = PocketCSVParser(csv_file_path)
    return parser.parse_csv()
