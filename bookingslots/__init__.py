"""
bookingslots - appointment availability engine for booking businesses.
"""

__version__ = "0.1.0"
