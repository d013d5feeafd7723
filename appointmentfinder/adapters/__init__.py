"""
Adapters layer - External integrations (slot storage).
"""

from .http_slot_store import HttpSlotStore
from .json_slot_store import JsonSlotStore

__all__ = ["HttpSlotStore", "JsonSlotStore"]
