"""Source discovery over configured namespace and collection candidates."""

from .discovery import SourceDiscovery, namespace_display_name
from .throttle import IntervalGate

__all__ = ["IntervalGate", "SourceDiscovery", "namespace_display_name"]
