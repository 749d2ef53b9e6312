"""
File-backed data source for tenants, schedules, time blocks and bookings.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List
from uuid import UUID

from pendulum import DateTime

from ..domain.exceptions import DataSourceError
from ..domain.models import Booking, BufferTime, Tenant, TimeBlock, WorkingHours, utc
from .records import (
    booking_from_record,
    buffer_time_from_record,
    convert,
    tenant_from_record,
    time_block_from_record,
    working_hours_from_record,
)

logger = logging.getLogger(__name__)


class JsonRepository:
    """
    Serves availability inputs from a JSON document.

    Expected layout (camelCase keys, UTC ISO 8601 timestamps):

        {
            "tenants": [{"id": "...", "bufferBeforeMinutes": 15, ...}],
            "workingHours": [{"tenantId": "...", "day": "Monday",
                              "startTime": "09:00", "endTime": "17:00"}],
            "timeBlocks": [{"id": "...", "tenantId": "...", "type": "Break",
                            "startDateTime": "...", "endDateTime": "..."}],
            "bookings": [{"id": "...", "tenantId": "...", "status": "Confirmed",
                          "startDateTime": "...", "endDateTime": "..."}],
            "bufferTimes": [{"tenantId": "...", "categoryId": null,
                             "beforeMinutes": 10, "afterMinutes": 5}]
        }

    Implements every data-source protocol of ``AvailabilityService``.
    """

    def __init__(self, document: Dict[str, Any], data_file: Path | None = None):
        """
        Validate and index a parsed document.

        Raises:
            DataSourceError: If the document or one of its records is malformed
        """
        self.data_file = data_file
        self._load(document)

    @classmethod
    def load_from_file(cls, data_file: Path) -> "JsonRepository":
        """
        Load the repository from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            DataSourceError: If the file or one of its records is malformed
        """
        data_file = Path(data_file)
        if not data_file.exists():
            raise FileNotFoundError(f"Data file not found: {data_file}")

        try:
            with open(data_file, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            raise DataSourceError(f"Invalid JSON in {data_file}: {exc}") from exc

        return cls(document, data_file=data_file)

    def _load(self, document: Any) -> None:
        if not isinstance(document, dict):
            raise DataSourceError("Data file must contain an object at the root level.")

        self._tenants: Dict[UUID, Tenant] = {}
        for record in self._section(document, "tenants"):
            tenant = convert("tenant", tenant_from_record, record)
            self._tenants[tenant.id] = tenant

        self._working_hours: List[WorkingHours] = [
            convert("working hours", working_hours_from_record, record)
            for record in self._section(document, "workingHours")
        ]
        self._time_blocks: List[TimeBlock] = [
            convert("time block", time_block_from_record, record)
            for record in self._section(document, "timeBlocks")
        ]
        self._bookings: List[Booking] = [
            convert("booking", booking_from_record, record)
            for record in self._section(document, "bookings")
        ]
        self._buffer_times: List[BufferTime] = [
            convert("buffer time", buffer_time_from_record, record)
            for record in self._section(document, "bufferTimes")
        ]

        logger.debug(
            "Loaded %d tenant(s), %d working-hours, %d time-block and %d booking record(s)",
            len(self._tenants),
            len(self._working_hours),
            len(self._time_blocks),
            len(self._bookings),
        )

    @staticmethod
    def _section(document: Dict[str, Any], key: str) -> List[Any]:
        # Missing and null sections are both empty
        records = document.get(key)
        if records is None:
            return []
        if not isinstance(records, list):
            raise DataSourceError(f"Section '{key}' must be a list, got {type(records).__name__}")
        return records

    @staticmethod
    def _overlaps_days(start: DateTime, end: DateTime, start_date: DateTime, end_date: DateTime) -> bool:
        window_start = utc(start_date).start_of("day")
        window_end = utc(end_date).start_of("day").add(days=1)
        return start < window_end and end > window_start

    async def get_tenant(self, tenant_id: UUID) -> Tenant | None:
        return self._tenants.get(tenant_id)

    async def get_working_hours(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[WorkingHours]:
        # Weekly schedule, independent of the range
        return [wh for wh in self._working_hours if wh.tenant_id == tenant_id]

    async def get_time_blocks(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[TimeBlock]:
        return [
            block for block in self._time_blocks
            if block.tenant_id == tenant_id
            and self._overlaps_days(block.start, block.end, start_date, end_date)
        ]

    async def get_bookings(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[Booking]:
        return [
            booking for booking in self._bookings
            if booking.tenant_id == tenant_id
            and self._overlaps_days(booking.start, booking.end, start_date, end_date)
        ]

    def list_tenants(self) -> List[Tenant]:
        return sorted(self._tenants.values(), key=lambda t: t.business_name.lower())

    def get_buffer_times(self, tenant_id: UUID) -> List[BufferTime]:
        return [bt for bt in self._buffer_times if bt.tenant_id == tenant_id]
