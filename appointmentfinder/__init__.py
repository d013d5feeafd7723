"""
appointmentfinder - find bookable sales-manager appointment slots for a day.
"""

__version__ = "0.1.0"
