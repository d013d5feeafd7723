"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_finder import AvailabilityFinderService, SlotLoaderProtocol

__all__ = ["AvailabilityFinderService", "SlotLoaderProtocol"]
