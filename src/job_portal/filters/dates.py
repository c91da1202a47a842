"""
Relative date buckets for "date posted" / "date saved" filters.

Buckets are cumulative: something posted today is also within the last
week and the last month. Anything without a usable timestamp only belongs
to ``ALL``.
"""

import logging
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


class DateBucket(str, Enum):
    """Relative date buckets, narrowest first."""

    TODAY = "today"
    THREE_DAYS = "three_days"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


# Inclusive upper bound in whole days for each bounded bucket.
# TODAY is special-cased as "less than one day old".
_BUCKET_MAX_DAYS = {
    DateBucket.THREE_DAYS: 3,
    DateBucket.WEEK: 7,
    DateBucket.MONTH: 30,
}


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Coerce an API timestamp into an aware UTC datetime.

    Accepts datetimes, ISO-8601 strings (with or without a trailing ``Z``)
    and epoch seconds. Returns None for anything else.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Unparsable timestamp: {value!r}")
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_between(timestamp: datetime, now: datetime) -> int:
    """Whole days elapsed from ``timestamp`` to ``now`` (floor)."""
    return math.floor((now - timestamp).total_seconds() / SECONDS_PER_DAY)


class RelativeDateClassifier:
    """
    Classify timestamps relative to a reference "now".

    ``now`` may be fixed for reproducible results; when omitted the current
    UTC time is read on every call.
    """

    def __init__(self, now: Optional[datetime] = None):
        self._now = now

    def now(self) -> datetime:
        if self._now is None:
            return datetime.now(timezone.utc)
        if self._now.tzinfo is None:
            return self._now.replace(tzinfo=timezone.utc)
        return self._now

    def classify(self, value: Any, now: Optional[datetime] = None) -> DateBucket:
        """
        Return the narrowest bucket that contains ``value``.

        Args:
            value: Timestamp in any form accepted by ``parse_timestamp``
            now: Reference time, defaults to ``self.now()``
        """
        timestamp = parse_timestamp(value)
        if timestamp is None:
            return DateBucket.ALL

        days = days_between(timestamp, now or self.now())
        if days < 1:
            return DateBucket.TODAY
        for bucket, max_days in _BUCKET_MAX_DAYS.items():
            if days <= max_days:
                return bucket
        return DateBucket.ALL

    def matches(self, value: Any, bucket: Any, now: Optional[datetime] = None) -> bool:
        """
        True if ``value`` falls inside ``bucket``.

        Unknown bucket names match everything, like ``ALL``.
        """
        try:
            bucket = DateBucket(bucket)
        except ValueError:
            logger.warning(f"Unknown date bucket '{bucket}', treating as 'all'")
            return True

        if bucket == DateBucket.ALL:
            return True

        timestamp = parse_timestamp(value)
        if timestamp is None:
            return False

        days = days_between(timestamp, now or self.now())
        if bucket == DateBucket.TODAY:
            return days < 1
        return days <= _BUCKET_MAX_DAYS[bucket]
