"""
Trace Replay Strategy - Play the stored optimal solution forward.
"""

import logging
from typing import Optional, Tuple

from ..base import ReplayStrategy
from ..context import ReplayContext
from ..move import Move, decode_move
from ..puzzle import PuzzleState

logger = logging.getLogger(__name__)


class TraceReplayStrategy(ReplayStrategy):
    """
    Replays trace actions starting at the player's current position.

    The action index is moves_used + effective_starting_move_index, plus
    one for every demonstration move already applied. Each action is
    decoded against the live grid, so the recolored region reflects the
    board as it is now rather than the stored snapshot.
    """
    name = "trace"
    description = "Trace replay - Plays the optimal solution from the current move"

    def current_index(self, state: PuzzleState, context: ReplayContext) -> int:
        return state.moves_used + state.effective_starting_move_index + context.steps_applied

    def is_exhausted(self, state: PuzzleState, context: ReplayContext) -> bool:
        trace = context.trace
        if trace is None or not trace.has_actions:
            return True
        return self.current_index(state, context) >= len(trace.actions)

    def next_move(self, state: PuzzleState, context: ReplayContext) -> Optional[Move]:
        trace = context.trace
        index = self.current_index(state, context)
        action_id = trace.get_action(index)
        if action_id is None:
            return None

        move = decode_move(action_id, state.grid, trace.color_map)
        if move is None:
            logger.error(f"Trace action {action_id} at index {index} does not decode on the live grid")
            return None
        return move

    def progress(self, state: PuzzleState, context: ReplayContext) -> Optional[Tuple[float, str]]:
        trace = context.trace
        if trace is None or not trace.has_actions:
            return None
        done = self.current_index(state, context)
        total = len(trace.actions)
        return min(1.0, done / total), f"Trace move {done}/{total}"
