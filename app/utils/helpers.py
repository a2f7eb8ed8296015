# app/utils/helpers.py

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger(__name__)

# --- Time ---

def utc_now() -> datetime:
    """
    Returns the current UTC instant truncated to millisecond precision.

    MongoDB stores datetimes with millisecond resolution, so truncating up front
    means a timestamp read back from the database equals the one we stamped.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)

# --- Query Helpers ---

def contains_pattern(text: str) -> Dict[str, Any]:
    """
    Builds a case-insensitive "contains" regex condition for a MongoDB query.

    Args:
        text: The raw substring supplied by the client. Regex metacharacters
              are escaped so the match stays literal.

    Returns:
        A MongoDB condition dict usable as a field value.
    """
    return {"$regex": re.escape(text), "$options": "i"}

# --- Pagination Helpers ---

def calculate_skip(page: int, limit: int) -> int:
    """
    Calculates the number of documents to skip for pagination.

    Args:
        page: The current page number (1-based).
        limit: The number of items per page.

    Returns:
        The number of documents to skip.

    Raises:
        ValueError: If page or limit are not positive integers.
    """
    if not isinstance(page, int) or page < 1:
        raise ValueError("Page number must be a positive integer.")
    if not isinstance(limit, int) or limit < 1:
        raise ValueError("Page limit must be a positive integer.")
    return (page - 1) * limit

def calculate_total_pages(total_items: int, limit: int) -> int:
    """
    Calculates the total number of pages required.

    Args:
        total_items: The total number of items.
        limit: The number of items per page.

    Returns:
        The total number of pages, 0 when there are no items.

    Raises:
        ValueError: If limit is not a positive integer.
    """
    if not isinstance(limit, int) or limit < 1:
        raise ValueError("Page limit must be a positive integer.")
    if total_items < 0:
        raise ValueError("Total items cannot be negative.")
    return math.ceil(total_items / limit)
