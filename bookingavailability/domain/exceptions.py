"""
Domain-specific exception hierarchy for the availability service.
"""

from __future__ import annotations

from typing import Any, Optional


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class TenantNotFoundError(AvailabilityError):
    """Raised when availability is requested for an unknown tenant."""

    def __init__(self, tenant_id: Any):
        self.tenant_id = tenant_id
        super().__init__(f"Tenant not found: {tenant_id}")


class InvalidRangeError(AvailabilityError):
    """Raised by boundary validation when a requested date range is unusable."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class DataSourceError(AvailabilityError):
    """Raised when tenant, schedule or booking data cannot be fetched or parsed."""
