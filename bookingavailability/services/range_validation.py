"""
Validation of availability queries at the application boundary.
"""

from __future__ import annotations

from typing import Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import InvalidRangeError
from ..domain.models import utc

DEFAULT_MAX_RANGE_DAYS = 31


def validate_date_range(
    start_date: Optional[DateTime],
    end_date: Optional[DateTime],
    *,
    max_days: int = DEFAULT_MAX_RANGE_DAYS,
    now: Optional[DateTime] = None,
    allow_past: bool = False,
) -> tuple[DateTime, DateTime]:
    """
    Check a requested range and return it normalized to UTC.

    Args:
        start_date: First requested day
        end_date: Last requested day
        max_days: Longest allowed distance between start and end
        now: Reference time for the past-start check (defaults to now)
        allow_past: Accept a start date before today

    Returns:
        (start_date, end_date) in UTC

    Raises:
        InvalidRangeError: If a date is missing or the range is unusable
    """
    missing = [
        name for name, value in (("startDate", start_date), ("endDate", end_date))
        if value is None
    ]
    if missing:
        raise InvalidRangeError(
            f"Missing required parameters: {', '.join(missing)}",
            field=missing[0],
        )

    start = utc(start_date)
    end = utc(end_date)

    if start > end:
        raise InvalidRangeError("startDate must not be after endDate", field="startDate")

    if end > start.add(days=max_days):
        raise InvalidRangeError(
            f"Date range cannot exceed {max_days} days",
            field="endDate",
        )

    if not allow_past:
        today = utc(now or pendulum.now("UTC")).date()
        if start.date() < today:
            raise InvalidRangeError("startDate cannot be in the past", field="startDate")

    return start, end
