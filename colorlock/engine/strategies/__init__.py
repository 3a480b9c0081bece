"""
Strategies Package - Concrete replay strategy implementations.
"""

from .trace_replay import TraceReplayStrategy
from .fallback import FallbackStrategy

__all__ = [
    "TraceReplayStrategy",
    "FallbackStrategy",
]
