"""
Adapters layer - External data sources (meeting exports).
"""

from .json_store import JsonMeetingStore

__all__ = ["JsonMeetingStore"]
