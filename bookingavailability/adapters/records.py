"""
Conversion of JSON records (camelCase, as served by the booking platform)
into domain objects.
"""

from __future__ import annotations

from datetime import time
from typing import Any, Dict, Mapping, Optional
from uuid import UUID

import pendulum
from pendulum import DateTime

from ..domain.exceptions import DataSourceError
from ..domain.models import (
    WEEKDAY_NAMES,
    Booking,
    BookingStatus,
    BufferTime,
    RecurrenceFrequency,
    RecurrencePattern,
    Tenant,
    TimeBlock,
    TimeBlockType,
    WorkingHours,
)

BOOKING_STATUS_ORDER = [
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.COMPLETED,
    BookingStatus.CANCELLED,
]


def parse_datetime(value: Any) -> DateTime:
    """Parse an ISO 8601 timestamp into a UTC pendulum DateTime."""
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO 8601 string, got {value!r}")

    dt = pendulum.parse(value, tz="UTC")
    if isinstance(dt, DateTime):
        return dt.in_timezone("UTC")

    raise ValueError(f"Could not parse datetime: {value}")


def parse_time(value: Any) -> time:
    if not isinstance(value, str):
        raise ValueError(f"Expected a HH:MM time, got {value!r}")
    return time.fromisoformat(value)


def parse_uuid(value: Any) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def parse_optional_uuid(value: Any) -> Optional[UUID]:
    return None if value in (None, "") else parse_uuid(value)


def parse_weekday(value: Any) -> int:
    """Accept a weekday name ("Monday") or an index (0=Monday, 6=Sunday)."""
    if isinstance(value, int) and not isinstance(value, bool):
        if value not in range(7):
            raise ValueError(f"Weekday index must be between 0 and 6, got {value}")
        return value

    name = str(value).strip().lower()
    if name not in WEEKDAY_NAMES:
        raise ValueError(f"Unknown weekday: {value!r}")
    return WEEKDAY_NAMES.index(name)


def parse_booking_status(value: Any) -> BookingStatus:
    """Accept a status name in any case or its ordinal."""
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return BOOKING_STATUS_ORDER[value]
        except IndexError:
            raise ValueError(f"Unknown booking status ordinal: {value}") from None

    for status in BookingStatus:
        if status.value.lower() == str(value).lower():
            return status
    raise ValueError(f"Unknown booking status: {value!r}")


def _parse_named(enum_cls, value: Any):
    for member in enum_cls:
        if member.value.lower() == str(value).lower():
            return member
    raise ValueError(f"Unknown {enum_cls.__name__}: {value!r}")


def _check_interval(start: DateTime, end: DateTime) -> None:
    if start >= end:
        raise ValueError(f"startDateTime {start} must be before endDateTime {end}")


def tenant_from_record(record: Mapping[str, Any]) -> Tenant:
    return Tenant(
        id=parse_uuid(record["id"]),
        business_name=record.get("businessName", ""),
        time_zone=record.get("timeZone") or "UTC",
        buffer_before_minutes=int(record.get("bufferBeforeMinutes", 0)),
        buffer_after_minutes=int(record.get("bufferAfterMinutes", 0)),
    )


def working_hours_from_record(record: Mapping[str, Any]) -> WorkingHours:
    return WorkingHours(
        tenant_id=parse_uuid(record["tenantId"]),
        day=parse_weekday(record["day"]),
        start_time=parse_time(record["startTime"]),
        end_time=parse_time(record["endTime"]),
        max_concurrent_bookings=int(record.get("maxConcurrentBookings", 1)),
        is_active=bool(record.get("isActive", True)),
        service_id=parse_optional_uuid(record.get("serviceId")),
    )


def recurrence_from_record(record: Optional[Mapping[str, Any]]) -> Optional[RecurrencePattern]:
    if not record:
        return None

    end_date = record.get("endDate")
    return RecurrencePattern(
        frequency=_parse_named(RecurrenceFrequency, record["frequency"]),
        interval=int(record.get("interval", 1)),
        days_of_week=tuple(parse_weekday(d) for d in record.get("daysOfWeek") or []),
        end_date=parse_datetime(end_date).date() if end_date else None,
        max_occurrences=record.get("maxOccurrences"),
        day_of_month=record.get("dayOfMonth"),
    )


def time_block_from_record(record: Mapping[str, Any]) -> TimeBlock:
    block = TimeBlock(
        id=parse_uuid(record["id"]),
        tenant_id=parse_uuid(record["tenantId"]),
        start=parse_datetime(record["startDateTime"]),
        end=parse_datetime(record["endDateTime"]),
        type=_parse_named(TimeBlockType, record.get("type", TimeBlockType.CUSTOM.value)),
        reason=record.get("reason"),
        recurrence=recurrence_from_record(record.get("recurrencePattern")),
        external_event_id=record.get("externalEventId"),
    )
    _check_interval(block.start, block.end)
    return block


def booking_from_record(record: Mapping[str, Any]) -> Booking:
    booking = Booking(
        id=parse_uuid(record["id"]),
        tenant_id=parse_uuid(record["tenantId"]),
        start=parse_datetime(record["startDateTime"]),
        end=parse_datetime(record["endDateTime"]),
        status=parse_booking_status(record.get("status", BookingStatus.PENDING.value)),
        service_id=parse_optional_uuid(record.get("serviceId")),
        category_id=parse_optional_uuid(record.get("categoryId")),
    )
    _check_interval(booking.start, booking.end)
    return booking


def buffer_time_from_record(record: Mapping[str, Any]) -> BufferTime:
    return BufferTime(
        tenant_id=parse_uuid(record["tenantId"]),
        category_id=parse_optional_uuid(record.get("categoryId")),
        before_minutes=int(record.get("beforeMinutes", 0)),
        after_minutes=int(record.get("afterMinutes", 0)),
    )


def convert(kind: str, parser, record: Dict[str, Any]):
    """
    Run a record parser, reporting malformed input as a DataSourceError.
    """
    try:
        return parser(record)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        record_id = record.get("id", "?") if isinstance(record, dict) else "?"
        raise DataSourceError(f"Invalid {kind} record ({record_id}): {exc}") from exc
