"""
Service layer helpers that orchestrate data sources and domain logic.
"""

from .availability import AvailabilityService, BookingDataSourceProtocol

__all__ = ["AvailabilityService", "BookingDataSourceProtocol"]
