"""
Utility helpers
"""

from typing import Optional
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Naive UTC timestamp, the form stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_timestamp_with_timezone(timestamp: Optional[datetime]) -> Optional[str]:
    """Render a timestamp as ISO-8601 with a trailing 'Z'"""
    if not timestamp:
        return None
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    return timestamp.isoformat() + 'Z'
