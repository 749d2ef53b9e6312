"""
Application service for computing a tenant's free booking time.

The service fetches the tenant, its weekly schedule, time blocks and bookings
through small data-source protocols and delegates the actual computation to
the domain-level ``AvailabilityCalculator``. Any data source (the JSON
repository, the booking-service client, or an in-memory stub in tests) can be
plugged in.
"""

from __future__ import annotations

import logging
from typing import List, Protocol
from uuid import UUID

from pendulum import DateTime

from ..domain.availability_calculator import AvailabilityCalculator
from ..domain.exceptions import TenantNotFoundError
from ..domain.models import (
    AvailabilityResult,
    Booking,
    BufferSettings,
    Tenant,
    TimeBlock,
    WorkingHours,
    utc,
)

logger = logging.getLogger(__name__)


class TenantSource(Protocol):
    async def get_tenant(self, tenant_id: UUID) -> Tenant | None:
        """Return the tenant, or None if it does not exist."""


class WorkingHoursSource(Protocol):
    async def get_working_hours(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[WorkingHours]:
        """Return the tenant's working hours for all days of the week."""


class TimeBlockSource(Protocol):
    async def get_time_blocks(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[TimeBlock]:
        """Return time blocks overlapping the given days."""


class BookingSource(Protocol):
    async def get_bookings(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[Booking]:
        """Return bookings of any status overlapping the given days."""


class AvailabilityService:
    """
    Orchestrates data retrieval and the availability calculation.

    Holds no state between calls; every call performs its own fetches.
    """

    def __init__(
        self,
        tenants: TenantSource,
        working_hours: WorkingHoursSource,
        time_blocks: TimeBlockSource,
        bookings: BookingSource,
    ) -> None:
        self._tenants = tenants
        self._working_hours = working_hours
        self._time_blocks = time_blocks
        self._bookings = bookings

    async def compute_available_ranges(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> AvailabilityResult:
        """
        Compute the free time ranges of a tenant between two dates.

        The range is expected to be validated by the caller.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        start_date = utc(start_date)
        end_date = utc(end_date)

        tenant = await self._require_tenant(tenant_id)

        working_hours = await self._working_hours.get_working_hours(tenant_id, start_date, end_date)
        time_blocks = await self._time_blocks.get_time_blocks(tenant_id, start_date, end_date)
        bookings = await self._bookings.get_bookings(tenant_id, start_date, end_date)

        self._warn_on_duplicate_days(tenant_id, working_hours)

        calculator = AvailabilityCalculator(buffer_settings=tenant.buffer_settings())
        ranges = calculator.calculate(
            start_date=start_date,
            end_date=end_date,
            working_hours=working_hours,
            time_blocks=time_blocks,
            bookings=bookings,
        )

        logger.info(
            "Computed %d available range(s) for tenant %s from %s to %s",
            len(ranges),
            tenant_id,
            start_date.to_date_string(),
            end_date.to_date_string(),
        )

        return AvailabilityResult(
            tenant_id=tenant_id,
            start_date=start_date,
            end_date=end_date,
            available_ranges=ranges,
        )

    async def get_buffer_settings(self, tenant_id: UUID) -> BufferSettings:
        """Return the tenant-wide buffer pair applied to every booking."""
        tenant = await self._require_tenant(tenant_id)
        return tenant.buffer_settings()

    async def _require_tenant(self, tenant_id: UUID) -> Tenant:
        tenant = await self._tenants.get_tenant(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        return tenant

    @staticmethod
    def _warn_on_duplicate_days(tenant_id: UUID, working_hours: List[WorkingHours]) -> None:
        seen: set[int] = set()
        for entry in working_hours:
            if entry.day in seen:
                logger.warning(
                    "Tenant %s has several working-hours records for %s; using the first",
                    tenant_id,
                    entry.day_name,
                )
            seen.add(entry.day)
