"""
Date Conversion Utility

Parses form dates (YYYY-MM-DD) and renders stored UTC report timestamps in
the resorts' local time zone (e.g., "Sunday, March 16, 2025 9:05 AM MDT").
"""

from datetime import datetime
import pytz


def parse_iso_date(date_str):
    """
    Parse a date from YYYY-MM-DD format.

    Args:
        date_str (str): Date in YYYY-MM-DD format

    Returns:
        datetime.date: The parsed date

    Raises:
        ValueError: If date_str is not in valid YYYY-MM-DD format
    """
    try:
        return datetime.strptime(date_str.strip(), '%Y-%m-%d').date()
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid date format '{date_str}'. Expected YYYY-MM-DD") from e


def format_report_time(timestamp, timezone='America/Denver'):
    """
    Convert a stored report timestamp to a display string.

    Args:
        timestamp (datetime): Naive UTC or aware datetime
        timezone (str): Timezone string (default: 'America/Denver')

    Returns:
        str: Formatted local time, or '' if timestamp is None
    """
    if timestamp is None:
        return ''

    if timestamp.tzinfo is None:
        timestamp = pytz.utc.localize(timestamp)

    local = timestamp.astimezone(pytz.timezone(timezone))
    hour = local.strftime('%I').lstrip('0')
    return f"{local.strftime('%A, %B')} {local.day}, {local.year} {hour}:{local.strftime('%M %p %Z')}"
