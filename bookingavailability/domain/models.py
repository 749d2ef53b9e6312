"""
Domain models for tenants, schedules, bookings and time ranges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID

import pendulum
from pendulum import DateTime

# Upper bound for a single buffer, in minutes (8 hours).
MAX_BUFFER_MINUTES = 480

WEEKDAY_NAMES = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


@dataclass(frozen=True, order=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Ranges sort by start, then end. Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def intersect(self, other: "TimeRange") -> "TimeRange | None":
        """
        Calculate the intersection of two time ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start)
        end = min(self.end, other.end)

        return TimeRange(start=start, end=end)

    def to_dict(self) -> Dict[str, str]:
        return {
            "start": self.start.to_iso8601_string(),
            "end": self.end.to_iso8601_string(),
        }

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass
class WorkingHours:
    """
    Recurring bookable hours of a tenant for one day of the week.

    ``day`` follows pendulum's convention (0=Monday, 6=Sunday). Equal start
    and end times mark a day off.
    """
    tenant_id: UUID
    day: int
    start_time: time
    end_time: time
    max_concurrent_bookings: int = 1
    is_active: bool = True
    service_id: Optional[UUID] = None

    def __post_init__(self):
        if self.day not in range(7):
            raise ValueError(f"day must be between 0 and 6, got {self.day}")
        if self.max_concurrent_bookings < 1:
            raise ValueError("max_concurrent_bookings must be at least 1")

    def is_day_off(self) -> bool:
        return self.start_time == self.end_time

    def range_for(self, day: DateTime) -> TimeRange | None:
        """
        Get the UTC working range for a specific calendar day.
        Returns None on a day off or when the end lies before the start.
        """
        if self.is_day_off():
            return None

        base = day.in_timezone("UTC")
        start = base.set(
            hour=self.start_time.hour,
            minute=self.start_time.minute,
            second=0,
            microsecond=0
        )
        end = base.set(
            hour=self.end_time.hour,
            minute=self.end_time.minute,
            second=0,
            microsecond=0
        )
        if start >= end:
            return None

        return TimeRange(start=start, end=end)

    @property
    def day_name(self) -> str:
        return WEEKDAY_NAMES[self.day]


class TimeBlockType(str, Enum):
    VACATION = "Vacation"
    BREAK = "Break"
    CUSTOM = "Custom"
    GOOGLE_CALENDAR_EVENT = "GoogleCalendarEvent"


class RecurrenceFrequency(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


@dataclass(frozen=True)
class RecurrencePattern:
    """
    Recurrence metadata attached to a time block.

    Only materialized occurrences are ever handed to the calculator, so this
    is carried for display and round-tripping, never expanded.
    """
    frequency: RecurrenceFrequency
    interval: int = 1
    days_of_week: tuple = ()
    end_date: Optional[date] = None
    max_occurrences: Optional[int] = None
    day_of_month: Optional[int] = None

    def __post_init__(self):
        if self.interval < 1:
            raise ValueError(f"interval must be at least 1, got {self.interval}")
        if self.day_of_month is not None and not 1 <= self.day_of_month <= 31:
            raise ValueError(f"day_of_month must be between 1 and 31, got {self.day_of_month}")
        if self.max_occurrences is not None and self.max_occurrences < 1:
            raise ValueError("max_occurrences must be positive")


@dataclass
class TimeBlock:
    """
    Unconditionally busy time of a tenant (vacation, break, synced event).
    """
    id: UUID
    tenant_id: UUID
    start: DateTime
    end: DateTime
    type: TimeBlockType = TimeBlockType.CUSTOM
    reason: Optional[str] = None
    recurrence: Optional[RecurrencePattern] = None
    external_event_id: Optional[str] = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def blocks_availability(self) -> bool:
        """Only open bookings occupy the calendar."""
        return self in (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass
class Booking:
    id: UUID
    tenant_id: UUID
    start: DateTime
    end: DateTime
    status: BookingStatus = BookingStatus.PENDING
    service_id: Optional[UUID] = None
    category_id: Optional[UUID] = None


def _check_buffer(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} cannot be negative")
    if value > MAX_BUFFER_MINUTES:
        raise ValueError(f"{name} cannot exceed {MAX_BUFFER_MINUTES} minutes (8 hours)")


@dataclass(frozen=True)
class BufferSettings:
    """Tenant-wide margin kept free before and after every booking."""
    before_minutes: int = 0
    after_minutes: int = 0

    def __post_init__(self):
        _check_buffer("before_minutes", self.before_minutes)
        _check_buffer("after_minutes", self.after_minutes)


@dataclass
class BufferTime:
    """
    Buffer configuration record, optionally scoped to a service category.

    The calculator applies the tenant-wide pair only; category records are
    stored and listed but not resolved per booking.
    """
    tenant_id: UUID
    category_id: Optional[UUID] = None
    before_minutes: int = 0
    after_minutes: int = 0

    def __post_init__(self):
        _check_buffer("before_minutes", self.before_minutes)
        _check_buffer("after_minutes", self.after_minutes)

    @property
    def is_global(self) -> bool:
        return self.category_id is None


@dataclass
class Tenant:
    id: UUID
    business_name: str = ""
    time_zone: str = "UTC"
    buffer_before_minutes: int = 0
    buffer_after_minutes: int = 0

    def __post_init__(self):
        _check_buffer("buffer_before_minutes", self.buffer_before_minutes)
        _check_buffer("buffer_after_minutes", self.buffer_after_minutes)

    def buffer_settings(self) -> BufferSettings:
        return BufferSettings(
            before_minutes=self.buffer_before_minutes,
            after_minutes=self.buffer_after_minutes,
        )


@dataclass
class AvailabilityResult:
    """
    Free time of a tenant over a queried date range, sorted by start.
    """
    tenant_id: UUID
    start_date: DateTime
    end_date: DateTime
    available_ranges: List[TimeRange] = field(default_factory=list)

    def total_minutes(self) -> int:
        return sum(r.duration_minutes() for r in self.available_ranges)

    def by_day(self) -> Dict[date, List[TimeRange]]:
        """Group the ranges by the UTC date they start on."""
        grouped: Dict[date, List[TimeRange]] = {}
        for time_range in self.available_ranges:
            grouped.setdefault(time_range.start.date(), []).append(time_range)
        return grouped

    def to_dict(self) -> Dict[str, object]:
        return {
            "tenantId": str(self.tenant_id),
            "availableRanges": [r.to_dict() for r in self.available_ranges],
        }


def utc(dt) -> DateTime:
    """Normalize a stdlib or pendulum datetime to a pendulum UTC DateTime."""
    if isinstance(dt, DateTime):
        return dt.in_timezone("UTC")
    return pendulum.instance(dt).in_timezone("UTC")
