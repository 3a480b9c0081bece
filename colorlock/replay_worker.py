"""
Replay Worker Module for Color Lock

Provides a background QThread worker that ticks a ReplayManager on a fixed
interval. Communicates with the caller via Qt signals for thread-safe
state updates.
"""

import logging
from typing import Optional

from PyQt5.QtCore import QThread, pyqtSignal

from colorlock.replay_manager import ReplayManager, ReplayPhase, ReplayStep


# Configure module logger
logger = logging.getLogger(__name__)


class ReplayWorker(QThread):
    """
    Background worker thread for solution demonstrations.

    Runs a loop that:
    1. Waits one tick interval
    2. Applies one replay step
    3. Emits the new state
    4. Stops when the replay is finished or cancelled

    Signals:
        status_changed(str): Emitted when worker status changes
        step_applied(object): Emitted with each ReplayStep
        state_changed(object): Emitted with the PuzzleState after each step
        phase_changed(str): Emitted with the ReplayPhase name on transitions
        finished_replay(object): Emitted with the final PuzzleState
        error_occurred(str): Emitted when a tick raises

    Example:
        worker = ReplayWorker(ReplayManager(state, trace))
        worker.state_changed.connect(view.show_state)
        worker.start()
        # ...
        worker.request_stop()
        worker.wait()
    """

    # Signals (thread-safe)
    status_changed = pyqtSignal(str)
    step_applied = pyqtSignal(object)
    state_changed = pyqtSignal(object)
    phase_changed = pyqtSignal(str)
    finished_replay = pyqtSignal(object)
    error_occurred = pyqtSignal(str)

    DEFAULT_TICK_INTERVAL_MS = 3000

    # Longest single sleep, so request_stop() is noticed quickly
    POLL_INTERVAL_MS = 100

    def __init__(self, manager: ReplayManager, tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS):
        """
        Initialize the replay worker.

        Args:
            manager: Replay to drive
            tick_interval_ms: Delay before each replay step
        """
        super().__init__()
        self._manager = manager
        self.tick_interval_ms = max(0, int(tick_interval_ms))
        self._running = False
        self._last_step: Optional[ReplayStep] = None

    @property
    def manager(self) -> ReplayManager:
        return self._manager

    @property
    def last_step(self) -> Optional[ReplayStep]:
        return self._last_step

    def run(self):
        """
        Main worker loop. Called when thread starts.

        Ticks the manager once per interval until the replay is done or a
        stop is requested. A tick that raises ends the replay.
        """
        self._running = True
        logger.info(f"Replay worker started, tick interval {self.tick_interval_ms}ms")
        self.status_changed.emit("Running")

        phase = self._manager.phase
        while self._running and not self._manager.is_done:
            self._wait(self.tick_interval_ms)
            if not self._running:
                break

            try:
                step = self._manager.tick()
            except Exception as e:
                logger.exception("Error in replay tick")
                self.error_occurred.emit(str(e))
                self._manager.cancel()
                break

            if step is not None:
                self._last_step = step
                self.step_applied.emit(step)
                self.state_changed.emit(step.state)

            if self._manager.phase != phase:
                phase = self._manager.phase
                logger.info(f"Replay phase changed: {phase.name}")
                self.phase_changed.emit(phase.name)

        self._running = False
        status = "Cancelled" if self._manager.phase == ReplayPhase.CANCELLED else "Finished"
        self.status_changed.emit(status)
        self.finished_replay.emit(self._manager.state)
        logger.info(f"Replay worker stopped after {self._manager.steps_applied} steps")

    def _wait(self, duration_ms: int) -> None:
        """Sleep in short slices, returning early once a stop is requested."""
        remaining = duration_ms
        while remaining > 0 and self._running:
            chunk = min(self.POLL_INTERVAL_MS, remaining)
            self.msleep(chunk)
            remaining -= chunk

    def request_stop(self):
        """
        Request the worker to stop.

        Cancels the manager immediately, so a tick already scheduled in
        the loop cannot apply another move. Use wait() afterwards to block
        until the thread exits.
        """
        logger.info("Stop requested")
        self._running = False
        self._manager.cancel()

    def is_running(self) -> bool:
        """
        Check if the worker is currently running.

        Returns:
            True if worker loop is active, False otherwise
        """
        return self._running
