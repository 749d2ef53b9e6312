"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import (
    AvailabilityService,
    BookingSource,
    TenantSource,
    TimeBlockSource,
    WorkingHoursSource,
)
from .range_validation import validate_date_range

__all__ = [
    "AvailabilityService",
    "BookingSource",
    "TenantSource",
    "TimeBlockSource",
    "WorkingHoursSource",
    "validate_date_range",
]
