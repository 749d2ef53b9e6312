"""
REST client for fetching bookings from the booking service.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List
from uuid import UUID

import requests
from pendulum import DateTime

from ..domain.exceptions import DataSourceError
from ..domain.models import Booking, utc
from .records import booking_from_record, convert

logger = logging.getLogger(__name__)


class BookingApiClient:
    """
    Client for the booking service's booking list endpoint.

    Uses GET /api/bookings with startDate/endDate filters. The service scopes
    results to the tenant of the access token; records of other tenants are
    dropped here as well.
    """

    BOOKINGS_PATH = "/api/bookings"

    def __init__(self, base_url: str, access_token: str | None = None, timeout: float = 30):
        """
        Initialize the booking service client.

        Args:
            base_url: Root URL of the booking service, e.g. http://booking:8080
            access_token: Optional bearer token forwarded to the service
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}
        if access_token:
            self.headers["Authorization"] = f"Bearer {access_token}"

    async def get_bookings(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[Booking]:
        """Fetch bookings of any status overlapping the given days."""
        return await asyncio.to_thread(self.fetch_bookings, tenant_id, start_date, end_date)

    def fetch_bookings(
        self,
        tenant_id: UUID,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[Booking]:
        """
        Blocking variant of ``get_bookings``.

        Raises:
            DataSourceError: If the request fails or the payload is malformed
        """
        url = f"{self.base_url}{self.BOOKINGS_PATH}"
        params = {
            "tenantId": str(tenant_id),
            "startDate": utc(start_date).start_of("day").to_iso8601_string(),
            "endDate": utc(end_date).end_of("day").to_iso8601_string(),
        }

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise DataSourceError(f"Failed to fetch bookings from {url}: {e}") from e
        except ValueError as e:
            raise DataSourceError(f"Booking service returned invalid JSON: {e}") from e

        return self._parse_bookings(data, tenant_id)

    def _parse_bookings(self, data: Any, tenant_id: UUID) -> List[Booking]:
        """
        Parse the booking list response.

        Accepts either a bare list or a paginated envelope:
        {"items": [{"id": ..., "tenantId": ..., "startDateTime": ...,
                    "endDateTime": ..., "status": "Confirmed"}], "totalCount": 1}
        """
        if isinstance(data, dict):
            records = data.get("items", data.get("data"))
        else:
            records = data

        if not isinstance(records, list):
            raise DataSourceError("Booking service response does not contain a booking list")

        bookings: List[Booking] = []
        for record in records:
            booking = convert("booking", booking_from_record, self._normalize(record))
            if booking.tenant_id != tenant_id:
                logger.warning(
                    "Ignoring booking %s of tenant %s returned for tenant %s",
                    booking.id,
                    booking.tenant_id,
                    tenant_id,
                )
                continue
            bookings.append(booking)

        logger.debug("Fetched %d booking(s) for tenant %s", len(bookings), tenant_id)
        return bookings

    @staticmethod
    def _normalize(record: Any) -> Any:
        # The booking service names the status field "bookingStatus"
        if isinstance(record, dict) and "status" not in record and "bookingStatus" in record:
            normalized: Dict[str, Any] = dict(record)
            normalized["status"] = normalized.pop("bookingStatus")
            return normalized
        return record
