"""
Core business logic for calculating free booking time.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). Everything here works in UTC.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Sequence

from pendulum import DateTime

from .intervals import clip, merge_adjacent_or_overlapping, subtract_all
from .models import (
    Booking,
    BufferSettings,
    TimeBlock,
    TimeRange,
    WorkingHours,
    utc,
)

logger = logging.getLogger(__name__)


def iter_days(start_date: DateTime, end_date: DateTime) -> Iterator[DateTime]:
    """Yield the UTC start of every calendar day from start_date to end_date inclusive."""
    current = utc(start_date).start_of("day")
    last_day = utc(end_date).date()

    while current.date() <= last_day:
        yield current
        current = current.add(days=1)


def find_working_hours(working_hours: Sequence[WorkingHours], day: DateTime) -> WorkingHours | None:
    """Return the first working-hours record for the weekday of ``day``."""
    for entry in working_hours:
        if entry.day == day.day_of_week:
            return entry
    return None


def collect_time_block_periods(time_blocks: Sequence[TimeBlock], day: DateTime) -> List[TimeRange]:
    """
    Time blocks starting on ``day``, sorted by start.

    A block is attributed only to the day it starts on; whatever runs past
    midnight is not carried into the following day. Zero-length blocks
    cover nothing and are skipped.
    """
    target = day.date()
    periods = [
        TimeRange(start=utc(block.start), end=utc(block.end))
        for block in time_blocks
        if utc(block.start).date() == target and block.start < block.end
    ]
    return sorted(periods, key=lambda p: p.start)


def collect_booking_periods(
    bookings: Sequence[Booking],
    day: DateTime,
    buffer: BufferSettings | None = None,
) -> List[TimeRange]:
    """
    Pending or confirmed bookings starting on ``day``, sorted by start.

    Each booking is widened by the buffer before and after it. The buffer is
    applied to the raw endpoints, so a zero-length booking still occupies
    its buffer.
    """
    buffer = buffer or BufferSettings()
    target = day.date()
    periods: List[TimeRange] = []

    for booking in bookings:
        if not booking.status.blocks_availability or utc(booking.start).date() != target:
            continue

        start = utc(booking.start).subtract(minutes=buffer.before_minutes)
        end = utc(booking.end).add(minutes=buffer.after_minutes)
        if start < end:
            periods.append(TimeRange(start=start, end=end))

    return sorted(periods, key=lambda p: p.start)


def compute_day_ranges(
    day: DateTime,
    working_hours: Sequence[WorkingHours],
    time_blocks: Sequence[TimeBlock],
    bookings: Sequence[Booking],
    buffer: BufferSettings,
) -> List[TimeRange]:
    """
    Free time ranges within the working hours of a single day.

    Busy time is the union of the day's time blocks (never buffered) and its
    open bookings widened by the buffer. Busy periods are clipped to the
    working range, subtracted from it, and the remainder is merged.
    """
    entry = find_working_hours(working_hours, day)
    if entry is None:
        logger.debug("No working hours for %s, skipping", day.to_date_string())
        return []

    working_range = entry.range_for(day)
    if working_range is None:
        logger.debug("%s is a day off, skipping", day.to_date_string())
        return []

    busy_periods = collect_time_block_periods(time_blocks, day) + collect_booking_periods(
        bookings, day, buffer
    )

    clipped_busy = []
    for period in busy_periods:
        clipped = clip(period, working_range)
        if clipped is not None:
            clipped_busy.append(clipped)

    ranges = merge_adjacent_or_overlapping(subtract_all(working_range, clipped_busy))

    logger.debug(
        "%s: %d busy period(s), %d free range(s)",
        day.to_date_string(),
        len(clipped_busy),
        len(ranges),
    )
    return ranges


class AvailabilityCalculator:
    """
    Calculates free booking time over a date range.

    Algorithm, for every calendar day from the start date to the end date:
    1. Look up the working hours for the weekday (none or day off -> skip)
    2. Collect the time blocks and open bookings starting that day
    3. Widen bookings by the tenant buffer
    4. Clip busy periods to the working hours and subtract them
    5. Merge what is left
    Results of all days are concatenated and sorted by start.
    """

    def __init__(self, buffer_settings: BufferSettings | None = None):
        self.buffer_settings = buffer_settings or BufferSettings()

    def calculate(
        self,
        start_date: DateTime,
        end_date: DateTime,
        working_hours: Sequence[WorkingHours],
        time_blocks: Sequence[TimeBlock],
        bookings: Sequence[Booking],
    ) -> List[TimeRange]:
        """
        Compute the free ranges for every day of the range.

        Args:
            start_date: First day to compute (only the UTC date is used)
            end_date: Last day to compute, inclusive
            working_hours: Weekly schedule of the tenant
            time_blocks: Time blocks overlapping the range
            bookings: Bookings overlapping the range, any status

        Returns:
            List of TimeRange objects sorted by start
        """
        result: List[TimeRange] = []

        for day in iter_days(start_date, end_date):
            result.extend(
                compute_day_ranges(
                    day,
                    working_hours=working_hours,
                    time_blocks=time_blocks,
                    bookings=bookings,
                    buffer=self.buffer_settings,
                )
            )

        return sorted(result, key=lambda r: r.start)
