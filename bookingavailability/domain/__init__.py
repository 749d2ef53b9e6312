"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability_calculator import AvailabilityCalculator, compute_day_ranges
from .intervals import clip, merge_adjacent_or_overlapping, subtract_all
from .models import (
    AvailabilityResult,
    Booking,
    BookingStatus,
    BufferSettings,
    BufferTime,
    Tenant,
    TimeBlock,
    TimeBlockType,
    TimeRange,
    WorkingHours,
)

__all__ = [
    "AvailabilityCalculator",
    "AvailabilityResult",
    "Booking",
    "BookingStatus",
    "BufferSettings",
    "BufferTime",
    "Tenant",
    "TimeBlock",
    "TimeBlockType",
    "TimeRange",
    "WorkingHours",
    "clip",
    "compute_day_ranges",
    "merge_adjacent_or_overlapping",
    "subtract_all",
]
