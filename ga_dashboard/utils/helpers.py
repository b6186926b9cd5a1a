"""
Helper utilities
"""
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo
import math


def local_today(timezone: Optional[str] = None) -> date:
    """Today's calendar date in the given IANA zone, or system local time"""
    if timezone:
        return datetime.now(ZoneInfo(timezone)).date()
    return date.today()


def most_recent_sunday(today: date) -> date:
    """The latest Sunday on or before ``today``"""
    # date.weekday(): Monday=0 ... Sunday=6
    return today - timedelta(days=(today.weekday() + 1) % 7)


def round_half_up(value: float) -> int:
    """Round to the nearest int, .5 going up (builtin round() is banker's)"""
    return int(math.floor(value + 0.5))


def parse_count(value: str) -> int:
    """Parse a GA4 metric value string into an int count"""
    return int(float(value))


def format_number(value: int) -> str:
    """Format integer with thousands separators"""
    return f"{value:,}"
