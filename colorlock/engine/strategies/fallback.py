"""
Fallback Strategy - Naive region-by-region solve toward the target color.
"""

from typing import Optional

from ..base import ReplayStrategy
from ..board import Cell, flood_fill
from ..context import ReplayContext
from ..move import Move
from ..puzzle import PuzzleState


def find_first_unsolved_cell(state: PuzzleState) -> Optional[Cell]:
    """
    First unlocked cell in row-major order whose color is not the target.

    Returns:
        (row, col), or None if every unlocked cell has the target color
    """
    for r, row in enumerate(state.grid):
        for c, color in enumerate(row):
            if color != state.target_color and not state.is_locked(r, c):
                return r, c
    return None


class FallbackStrategy(ReplayStrategy):
    """
    Recolors one non-target region to the target color per move.

    Not optimal. Used when the trace cannot be followed from the current
    board, and as a standalone strategy when no trace is available.
    """
    name = "fallback"
    description = "Fallback - Recolors the first unsolved region to the target"

    def is_exhausted(self, state: PuzzleState, context: ReplayContext) -> bool:
        return find_first_unsolved_cell(state) is None

    def next_move(self, state: PuzzleState, context: ReplayContext) -> Optional[Move]:
        cell = find_first_unsolved_cell(state)
        if cell is None:
            return None

        row, col = cell
        region = flood_fill(state.grid, row, col, state.grid[row][col])
        return Move(row=row, col=col, color=state.target_color, cells=frozenset(region))
