"""
Day-granularity helpers for dated log file names.

Log files carry their date in the name (``laravel-2024-03-01.log``,
``laravel-2024-03-01.log.tar.bz2``). Age is always measured in whole
calendar days against a single reference date.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from logkeeper.errors import InvalidLogNameError

DATE_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2})")


def date_from_name(name: str) -> date:
    """
    Extract the date encoded in a log file name.

    The first ``YYYY-MM-DD`` occurrence wins.

    Args:
        name: Log or archive file name

    Returns:
        Date encoded in the name

    Raises:
        InvalidLogNameError: If no valid date is present
    """
    for match in DATE_PATTERN.finditer(name):
        try:
            return datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            # e.g. 2024-13-45, keep scanning
            continue
    raise InvalidLogNameError(f"No YYYY-MM-DD date in log name: {name}")


def has_date(name: str) -> bool:
    """Check whether a name carries a parseable date."""
    try:
        date_from_name(name)
    except InvalidLogNameError:
        return False
    return True


def age_in_days(name: str, today: date) -> int:
    """
    Compute the age of a log file in whole days.

    Future-dated names are clamped to 0 so ages are never negative.

    Args:
        name: Log or archive file name
        today: Reference date for the run

    Returns:
        Non-negative age in days
    """
    return max(0, (today - date_from_name(name)).days)
