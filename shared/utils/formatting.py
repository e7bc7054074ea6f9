"""
Display formatting helpers
"""

from datetime import datetime
from typing import Union

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_date(iso_date: Union[str, datetime]) -> str:
    """
    Format an ISO 8601 date as a short human readable date, e.g. "Jan 05, 2024"

    Args:
        iso_date: ISO 8601 string or datetime

    Returns:
        str: Formatted date

    Raises:
        ValueError: If the value is not a valid date
    """
    if isinstance(iso_date, datetime):
        value = iso_date
    else:
        if not isinstance(iso_date, str) or not iso_date.strip():
            raise ValueError("Invalid date format")
        text = iso_date.strip()
        # fromisoformat only accepts the trailing Z from 3.11 onwards
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError("Invalid date format") from None

    # Avoid strftime's locale dependent month names
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day:02d}, {value.year}"
