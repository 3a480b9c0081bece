"""
Base Strategy Module - Abstract base class for replay strategies.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from .context import ReplayContext
from .move import Move
from .puzzle import PuzzleState


class ReplayStrategy(ABC):
    """
    Abstract base class for demonstration-move strategies.

    A strategy proposes one move at a time for the current state. It never
    applies the move itself; the replay manager does that so every step
    goes through the same lock state machine as a player move.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description
    """
    name: str = "base"
    description: str = "Base strategy"

    @abstractmethod
    def is_exhausted(self, state: PuzzleState, context: ReplayContext) -> bool:
        """
        Check whether the strategy has no more moves to offer.

        Args:
            state: Current puzzle state
            context: Replay context

        Returns:
            True if replay should finish
        """
        pass

    @abstractmethod
    def next_move(self, state: PuzzleState, context: ReplayContext) -> Optional[Move]:
        """
        Propose the next demonstration move.

        Only called when is_exhausted() returned False.

        Args:
            state: Current puzzle state
            context: Replay context

        Returns:
            Move to apply, or None if the strategy cannot continue from
            this state
        """
        pass

    def progress(self, state: PuzzleState, context: ReplayContext) -> Optional[Tuple[float, str]]:
        """
        Describe how far the replay has got after a move.

        Called by the replay manager once per applied step, before any
        progress callback runs.

        Returns:
            (fraction 0.0-1.0, message), or None if there is nothing to report
        """
        return None
