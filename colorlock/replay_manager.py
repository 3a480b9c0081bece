"""
Replay Manager Module - Tick-driven state machine for solution demonstrations.

This module provides the ReplayManager, which plays demonstration moves on
a puzzle one tick at a time. Each tick is a single atomic transition:
either one move is applied or the replay ends.

Replay flow:
  - Starts with the trace strategy from the player's current position
  - Switches to the fallback strategy if a trace action does not decode
    on the live grid (the player has left the optimal path)
  - Finishes when the trace runs out, the fallback has nothing left to
    recolor, or the puzzle reaches a terminal state
  - Demonstration moves never change moves_used

Scheduling is left to the caller (see replay_worker.ReplayWorker). The
manager only guarantees that once cancel() returns, no tick mutates state.
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple, Type

from colorlock.engine import (
    FallbackStrategy,
    Move,
    PuzzleState,
    ReplayContext,
    ReplayStrategy,
    SolutionTrace,
    TraceReplayStrategy,
    apply_color_change,
)

logger = logging.getLogger(__name__)


__all__ = [
    "ReplayPhase",
    "ReplayStep",
    "ReplayManager",
    "PHASE_STRATEGIES",
    "phase_for_strategy",
]


class ReplayPhase(Enum):
    """
    State machine states for a replay.

    States:
        TRACE: Replaying actions from the solution trace
        FALLBACK: Recoloring leftover regions to the target naively
        FINISHED: Nothing left to demonstrate
        CANCELLED: Stopped by the caller, partial progress kept
    """
    TRACE = auto()
    FALLBACK = auto()
    FINISHED = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class ReplayStep:
    """
    One applied demonstration move.

    Attributes:
        number: 1-based step number within this replay
        move: Move that was applied
        state: Puzzle state after the move
        phase: Phase the move was made in
    """
    number: int
    move: Move
    state: PuzzleState
    phase: ReplayPhase


# Strategy that proposes moves in each running phase
PHASE_STRATEGIES: Dict[ReplayPhase, Type[ReplayStrategy]] = {
    ReplayPhase.TRACE: TraceReplayStrategy,
    ReplayPhase.FALLBACK: FallbackStrategy,
}


def phase_for_strategy(name: Optional[str]) -> ReplayPhase:
    """
    Starting phase for a strategy name ("trace" when None or empty).

    Raises:
        ValueError: If no running phase uses a strategy with that name
    """
    name = name or TraceReplayStrategy.name
    for phase, strategy_cls in PHASE_STRATEGIES.items():
        if strategy_cls.name == name:
            return phase
    available = ", ".join(cls.name for cls in PHASE_STRATEGIES.values())
    raise ValueError(f"Unknown strategy: {name}. Available: {available}")


class ReplayManager:
    """
    Cancellable replay of demonstration moves.

    State Flow:
        TRACE ---invalid decode---> FALLBACK
          |                            |
          | exhausted / terminal       | nothing left / terminal
          v                            v
        FINISHED <---------------------+

        any running phase ---cancel()---> CANCELLED
    """

    def __init__(
        self,
        state: PuzzleState,
        trace: Optional[SolutionTrace] = None,
        strategy_name: Optional[str] = None,
        context: Optional[ReplayContext] = None
    ):
        """
        Initialize the replay manager.

        Args:
            state: State to start demonstrating from
            trace: Solution trace (ignored if context is given)
            strategy_name: Starting strategy, "trace" (default) or "fallback"
            context: Pre-built context, e.g. with a progress callback
        """
        self._lock = threading.Lock()
        self._state = state
        self._context = context if context is not None else ReplayContext(trace=trace)

        self._phase = phase_for_strategy(strategy_name)
        self._strategy: ReplayStrategy = PHASE_STRATEGIES[self._phase]()

        trace = self._context.trace
        if self._phase == ReplayPhase.TRACE and (trace is None or not trace.has_actions):
            logger.info("No trace actions available, starting with fallback")
            self._switch_to_fallback()

        if state.is_terminal:
            self._phase = ReplayPhase.FINISHED

        logger.info(f"Replay created: phase={self._phase.name}, strategy={self._strategy.name}")

    @property
    def state(self) -> PuzzleState:
        """Get the current puzzle state."""
        return self._state

    @property
    def phase(self) -> ReplayPhase:
        """Get current state machine phase."""
        return self._phase

    @property
    def strategy_name(self) -> str:
        return self._strategy.name

    @property
    def context(self) -> ReplayContext:
        return self._context

    @property
    def steps_applied(self) -> int:
        """Number of demonstration moves applied so far."""
        return self._context.steps_applied

    @property
    def is_done(self) -> bool:
        """True once the replay is finished or cancelled."""
        return self._phase in (ReplayPhase.FINISHED, ReplayPhase.CANCELLED)

    def tick(self) -> Optional[ReplayStep]:
        """
        Perform one replay transition.

        The context's progress callback runs after the lock is released, so
        it may call cancel() or read the manager.

        Returns:
            The applied step, or None if no move was applied (the replay
            finished on this tick or was already done)
        """
        with self._lock:
            step, progress = self._tick_locked()

        if progress is not None:
            self._context.report_progress(*progress)
        return step

    def _tick_locked(self) -> Tuple[Optional[ReplayStep], Optional[Tuple[float, str]]]:
        if self.is_done:
            return None, None

        if self._context.is_cancelled():
            self._phase = ReplayPhase.CANCELLED
            logger.info("State[CANCELLED]: cancellation observed before tick")
            return None, None

        if self._state.is_terminal:
            self._finish("puzzle already finished")
            return None, None

        move = self._next_move()
        if move is None:
            return None, None

        strategy = self._strategy
        step = self._apply(move)
        if step is None:
            return None, None
        return step, strategy.progress(self._state, self._context)

    def cancel(self) -> None:
        """
        Stop the replay.

        Blocks until any in-flight tick completes; afterwards no tick
        changes state. Moves already applied are kept.
        """
        with self._lock:
            self._context.cancel()
            if not self.is_done:
                logger.info(f"State[{self._phase.name}]: cancelled after {self.steps_applied} steps")
                self._phase = ReplayPhase.CANCELLED

    def run_to_completion(self, max_steps: Optional[int] = None) -> List[ReplayStep]:
        """
        Tick until the replay is done, without any delay between steps.

        Args:
            max_steps: Stop after this many applied steps (None = no limit)

        Returns:
            Applied steps in order
        """
        steps = []
        while not self.is_done:
            if max_steps is not None and len(steps) >= max_steps:
                break
            step = self.tick()
            if step is not None:
                steps.append(step)
        return steps

    def _next_move(self) -> Optional[Move]:
        """Ask the current strategy for a move, switching or finishing as needed."""
        if self._strategy.is_exhausted(self._state, self._context):
            self._finish(f"{self._strategy.name} strategy exhausted")
            return None

        move = self._strategy.next_move(self._state, self._context)
        if move is not None:
            return move

        if self._phase != ReplayPhase.TRACE:
            self._finish(f"{self._strategy.name} strategy has no move")
            return None

        logger.warning("State[TRACE]: trace no longer matches the board, switching to FALLBACK")
        self._switch_to_fallback()
        if self._strategy.is_exhausted(self._state, self._context):
            self._finish("fallback has nothing to recolor")
            return None
        return self._strategy.next_move(self._state, self._context)

    def _apply(self, move: Move) -> Optional[ReplayStep]:
        new_state = apply_color_change(self._state, move.row, move.col, move.color)
        if new_state is self._state:
            self._finish(f"move ({move.row},{move.col}) had no effect")
            return None

        # Demonstration moves are not scored
        new_state = replace(new_state, moves_used=self._state.moves_used)
        self._state = new_state
        self._context.steps_applied += 1

        step = ReplayStep(
            number=self._context.steps_applied,
            move=move,
            state=new_state,
            phase=self._phase,
        )
        logger.debug(
            f"State[{self._phase.name}]: step {step.number} recolored "
            f"{move.cell_count} cells at ({move.row},{move.col}) to {move.color.value}"
        )

        if new_state.is_solved:
            self._finish("puzzle solved")
        elif new_state.is_lost:
            self._finish("puzzle lost")
        return step

    def _switch_to_fallback(self) -> None:
        self._phase = ReplayPhase.FALLBACK
        self._strategy = PHASE_STRATEGIES[self._phase]()

    def _finish(self, reason: str) -> None:
        logger.info(f"State[{self._phase.name}]: {reason}, transitioning to FINISHED after {self.steps_applied} steps")
        self._phase = ReplayPhase.FINISHED
