"""
Adapters layer - Data sources (JSON file, booking service REST API).
"""

from .booking_api_client import BookingApiClient
from .json_repository import JsonRepository

__all__ = ["BookingApiClient", "JsonRepository"]
