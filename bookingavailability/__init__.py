"""
bookingavailability - compute free booking time for a tenant.
"""

__version__ = "0.1.0"
