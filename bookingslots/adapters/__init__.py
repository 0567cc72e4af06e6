"""
Adapters layer - Booking API payload parsing and local data sources.
"""

from .file_source import JsonFileDataSource
from .payloads import parse_appointments, parse_business, parse_closures, parse_service

__all__ = [
    "JsonFileDataSource",
    "parse_appointments",
    "parse_business",
    "parse_closures",
    "parse_service",
]
