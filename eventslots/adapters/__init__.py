"""
Adapters layer - Booking sources standing in for the storage layer.
"""

from .file_booking_source import FileBookingSource, booking_from_record

__all__ = ["FileBookingSource", "booking_from_record"]
