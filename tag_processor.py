"""
Tag Processor Module for Pocket to Omnivore Importer
Turns Pocket's pipe-separated tag column into Omnivore labels.
"""

import re
from typing import List, Optional

from models import Tag, DEFAULT_TAG_COLOR

# A bare number in the tags column is a shifted time_added value, not a tag
NUMERIC_NOISE = re.compile(r"^\d+$")


def map_tags(tags_str: Optional[str]) -> List[Tag]:
    """
    Parse a pipe-separated tags string into label records.

    Args:
        tags_str: Raw tags column value, e.g. "tech|python"

    Returns:
        Tags in the order they appear in the string (duplicates kept)
    """
    if not tags_str or not tags_str.strip():
        return []

    if NUMERIC_NOISE.match(tags_str):
        return []

    names = [tag.strip() for tag in tags_str.split("|")]
    return [Tag(name=name, color=DEFAULT_TAG_COLOR, description="") for name in names if name]


def has_tags(tags_str: Optional[str]) -> bool:
    return len(map_tags(tags_str)) > 0
