"""
eventslots - availability and scheduling engine for event bookings.
"""

__version__ = "0.1.0"
