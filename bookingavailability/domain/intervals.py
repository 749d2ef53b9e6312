"""
Interval algebra over ``TimeRange`` values.

All functions are pure: they never mutate their inputs and always return
new lists.
"""

from __future__ import annotations

from typing import Iterable, List

from .models import TimeRange


def clip(period: TimeRange, bounds: TimeRange) -> TimeRange | None:
    """
    Intersect a period with its bounds.

    Returns None when the clipped result would be empty or inverted.
    """
    clipped_start = max(period.start, bounds.start)
    clipped_end = min(period.end, bounds.end)

    if clipped_start >= clipped_end:
        return None

    return TimeRange(start=clipped_start, end=clipped_end)


def subtract_all(base: TimeRange, busy_periods: Iterable[TimeRange]) -> List[TimeRange]:
    """
    Subtract busy periods from a base range, yielding the remaining pieces.

    Example:
    Base: 09:00 - 17:00
    Busy: [10:00-11:00, 14:00-15:00]
    Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
    """
    available: List[TimeRange] = [base]

    for busy in busy_periods:
        available = [
            piece
            for current in available
            for piece in _subtract_one(current, busy)
        ]

    return available


def _subtract_one(available: TimeRange, busy: TimeRange) -> List[TimeRange]:
    if not available.overlaps(busy):
        return [available]

    pieces: List[TimeRange] = []

    # Part before the busy period
    if available.start < busy.start:
        pieces.append(TimeRange(start=available.start, end=busy.start))

    # Part after the busy period
    if busy.end < available.end:
        pieces.append(TimeRange(start=busy.end, end=available.end))

    return pieces


def merge_adjacent_or_overlapping(ranges: Iterable[TimeRange]) -> List[TimeRange]:
    """
    Merge overlapping or exactly adjacent time ranges.

    Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
    """
    sorted_ranges = sorted(ranges, key=lambda r: r.start)
    if not sorted_ranges:
        return []

    merged: List[TimeRange] = []
    current = sorted_ranges[0]

    for following in sorted_ranges[1:]:
        if current.overlaps(following) or current.end == following.start:
            current = TimeRange(
                start=min(current.start, following.start),
                end=max(current.end, following.end)
            )
        else:
            merged.append(current)
            current = following

    merged.append(current)
    return merged


def total_minutes(ranges: Iterable[TimeRange]) -> int:
    """Sum of the durations of the given ranges, in minutes."""
    return sum(r.duration_minutes() for r in ranges)
