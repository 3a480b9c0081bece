"""
Autocomplete Module - Finish a puzzle that is already effectively won.

Once the locked region is in the target color and covers all but a few
cells, the remaining moves are a formality. Autocomplete plays them out:
one move per leftover region, then marks the puzzle solved.
"""

import logging
from dataclasses import replace

from .board import iter_regions, recolor
from .puzzle import PuzzleState

logger = logging.getLogger(__name__)

# Autocomplete is offered when at most this many cells are outside the lock
AUTOCOMPLETE_SLACK = 3


def should_show_autocomplete(state: PuzzleState) -> bool:
    """
    Check whether the puzzle is close enough to done to offer autocomplete.

    Args:
        state: Current puzzle state

    Returns:
        True if the attempt is still running, the lock is non-empty and in
        the target color, and it covers at least area - AUTOCOMPLETE_SLACK
        cells
    """
    if state.is_terminal:
        return False

    locked = len(state.locked_cells)
    if locked == 0:
        return False
    if locked < state.board_area - AUTOCOMPLETE_SLACK:
        return False

    return state.locked_color == state.target_color


def auto_complete_puzzle(state: PuzzleState) -> PuzzleState:
    """
    Recolor every remaining non-target region to the target color.

    Regions are found on the unlocked cells only, so two leftover patches
    separated by the lock count as two moves even if they share a color.
    Each region costs one move.

    Args:
        state: State to complete, left untouched

    Returns:
        New state with is_solved set, is_lost cleared and the lock cleared
    """
    target = state.target_color

    # Locked cells are masked out so regions cannot flow through them
    masked = [
        [None if state.is_locked(r, c) else cell for c, cell in enumerate(row)]
        for r, row in enumerate(state.grid)
    ]

    grid = state.grid
    moves = 0
    for region in iter_regions(masked):
        r, c = next(iter(region))
        color = masked[r][c]
        if color is None or color == target:
            continue
        grid = recolor(grid, region, target)
        moves += 1

    logger.info(f"Autocomplete applied {moves} moves")

    return replace(
        state,
        grid=grid,
        moves_used=state.moves_used + moves,
        is_solved=True,
        is_lost=False,
        locked_cells=frozenset(),
    )
