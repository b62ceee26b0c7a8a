"""
Builds Omnivore save requests from validated Pocket rows.
"""

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from models import ARCHIVED_STATE, SaveRequest, Tag, ValidatedRecord

POCKET_ARCHIVE_STATUS = "archive"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Leading signed integer; anything after the digits is ignored
_LEADING_INTEGER = re.compile(r"^\s*([+-]?[0-9]+)")


def should_archive(status: str, has_tags: bool, unread_untagged: bool = False) -> bool:
    """
    Decide whether an article should land in Omnivore as archived.

    By default the Pocket archive state is mirrored. With unread_untagged,
    archived articles without tags are kept unread so they can be triaged.
    """
    if status != POCKET_ARCHIVE_STATUS:
        return False

    if unread_untagged:
        return has_tags

    return True


def format_time_added(time_added: str) -> Optional[str]:
    """Convert a Unix timestamp string to ISO 8601 with milliseconds, or None."""
    match = _LEADING_INTEGER.match(time_added or "")
    if not match:
        return None

    try:
        moment = _EPOCH + timedelta(seconds=int(match.group(1)))
    except (OverflowError, ValueError):
        return None

    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_save_request(record: ValidatedRecord, tags: List[Tag], archive: bool) -> SaveRequest:
    """
    Build the save request for one article.

    Args:
        record: Validated CSV row
        tags: Labels to attach (omitted from the request when empty)
        archive: Whether to save the article as archived

    Returns:
        SaveRequest with a fresh client request id
    """
    request = SaveRequest(url=record.url, client_request_id=str(uuid.uuid4()))

    if tags:
        request.labels = list(tags)

    if archive:
        request.state = ARCHIVED_STATE

    timestamp = format_time_added(record.time_added)
    if timestamp:
        request.saved_at = timestamp
        request.published_at = timestamp

    return request
