"""
Replay Context Module - Shared context for replay strategy execution.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .trace import SolutionTrace


@dataclass
class ReplayContext:
    """
    Shared context passed to replay strategies containing the trace,
    cancellation, and progress reporting.

    Attributes:
        trace: Solution trace being replayed (None for fallback-only replay)
        cancel_flag: Threading event for cancellation
        timeout_sec: Maximum replay time in seconds, None for no limit
        start_time: When the replay started
        steps_applied: Demonstration moves applied so far
        progress_callback: Optional callback for progress updates
    """
    trace: Optional[SolutionTrace] = None
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    timeout_sec: Optional[float] = None
    start_time: float = field(default_factory=time.time)
    steps_applied: int = 0
    progress_callback: Optional[Callable[[float, str], None]] = None

    def is_cancelled(self) -> bool:
        """
        Check if cancellation requested or timeout exceeded.

        Returns:
            True if no further replay step may run
        """
        if self.cancel_flag.is_set():
            return True
        if self.timeout_sec is not None and self.elapsed_time() > self.timeout_sec:
            return True
        return False

    def cancel(self) -> None:
        self.cancel_flag.set()

    def report_progress(self, percent: float, message: str = "") -> None:
        """
        Report progress to the caller.

        Args:
            percent: Progress from 0.0 to 1.0
            message: Optional status message
        """
        if self.progress_callback:
            self.progress_callback(percent, message)

    def elapsed_time(self) -> float:
        """Seconds elapsed since the replay started."""
        return time.time() - self.start_time
