"""Date parsing utilities for Pivotal Tracker exports."""

from datetime import datetime


def parse_date_input(date_str: str) -> datetime:
    """Parse the date formats found in Pivotal Tracker CSV exports.

    Supports:
    - Export dates: Apr 1, 2024 / April 1, 2024
    - Export timestamps: Apr 1, 2024 3:15 PM
    - ISO dates: 2024-04-01, 2024-04-01T15:15:00Z

    Args:
        date_str: Date string to parse

    Returns:
        Parsed (naive) datetime object

    Raises:
        ValueError: If date format is not recognized
    """
    formats = [
        "%b %d, %Y",  # Apr 1, 2024
        "%B %d, %Y",  # April 1, 2024
        "%b %d, %Y %I:%M %p",  # Apr 1, 2024 3:15 PM
        "%B %d, %Y %I:%M %p",  # April 1, 2024 3:15 PM
        "%Y-%m-%d",  # 2024-04-01
        "%Y-%m-%dT%H:%M:%SZ",  # 2024-04-01T15:15:00Z
        "%Y-%m-%dT%H:%M:%S",  # 2024-04-01T15:15:00
        "%m/%d/%Y",  # 04/01/2024
    ]

    cleaned = date_str.strip()
    for fmt in formats:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue

    raise ValueError(
        f"Unable to parse date '{date_str}'. "
        f"Supported formats include: 'Apr 1, 2024', 'Apr 1, 2024 3:15 PM', "
        f"YYYY-MM-DD, YYYY-MM-DDTHH:MM:SSZ, MM/DD/YYYY"
    )


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an optional timestamp column.

    Returns:
        Parsed datetime, or None when the value is blank or unrecognized
    """
    if not value or not value.strip():
        return None
    try:
        return parse_date_input(value)
    except ValueError:
        return None


def parse_past_date(value: str | None, now: datetime | None = None) -> datetime:
    """Parse a date that must not lie in the future.

    Args:
        value: Date string (optional)
        now: Reference time (defaults to the current time)

    Returns:
        The parsed date, or ``now`` when parsing fails or the date is later
        than ``now``
    """
    if now is None:
        now = datetime.now()
    parsed = parse_timestamp(value)
    if parsed is None or parsed > now:
        return now
    return parsed
