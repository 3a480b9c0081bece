"""
Generator Module - Build a playable puzzle from a trace and difficulty tier.

All tiers share one optimal trace. Easier tiers pre-apply the first few
trace moves, so the player starts closer to the solution and the goal
drops by the same number of moves.
"""

import logging
from dataclasses import replace
from typing import Dict, Optional

from .board import Grid, find_largest_region, recolor
from .move import decode_move
from .puzzle import DifficultyLevel, PuzzleState
from .trace import SolutionTrace

logger = logging.getLogger(__name__)


# Trace moves applied before the player takes over
STARTING_MOVE_INDEX: Dict[DifficultyLevel, int] = {
    DifficultyLevel.HARD: 0,
    DifficultyLevel.MEDIUM: 1,
    DifficultyLevel.EASY: 3,
}

# loss_threshold = board area - slack; a 5x5 board gives 18 / 13 / 8
LOSS_THRESHOLD_SLACK: Dict[DifficultyLevel, int] = {
    DifficultyLevel.HARD: 7,
    DifficultyLevel.MEDIUM: 12,
    DifficultyLevel.EASY: 17,
}


def loss_threshold_for(area: int, difficulty: DifficultyLevel) -> int:
    """
    Locked-region size at which a wrong-color lock ends the attempt.

    Args:
        area: Board area in cells
        difficulty: Difficulty tier

    Returns:
        area minus the tier's slack, never below 1
    """
    return max(1, area - LOSS_THRESHOLD_SLACK[difficulty])


def apply_action_to_grid(grid: Grid, action_id: int, color_map=None) -> Grid:
    """
    Apply one encoded trace action to a grid.

    Returns:
        New grid, or `grid` itself if the action does not decode to a
        valid move on it
    """
    move = decode_move(action_id, grid, color_map)
    if move is None:
        logger.warning(f"Action {action_id} is not a valid move on this grid, skipping")
        return grid
    return recolor(grid, move.cells, move.color)


def generate_puzzle(
    trace: Optional[SolutionTrace],
    difficulty: DifficultyLevel,
    date_string: str = "",
    skip_difficulty_adjustments: bool = False
) -> PuzzleState:
    """
    Create the initial state of an attempt.

    Args:
        trace: Optimal solution trace for the puzzle
        difficulty: Difficulty tier
        date_string: Puzzle identifier, carried through untouched
        skip_difficulty_adjustments: Start from snapshots[0] regardless of
            tier, for traces that were already stored per difficulty

    Returns:
        Fresh PuzzleState with no moves used

    Raises:
        ValueError: If no trace or starting grid is supplied
    """
    if trace is None:
        raise ValueError("Cannot generate puzzle without a solution trace")
    if not trace.snapshots or not trace.starting_grid:
        raise ValueError("Cannot generate puzzle without a starting grid")

    difficulty = DifficultyLevel(difficulty)
    grid = trace.starting_grid

    wanted = 0 if skip_difficulty_adjustments else STARTING_MOVE_INDEX[difficulty]
    starting_index = min(wanted, len(trace.actions))
    if starting_index < wanted:
        logger.warning(
            f"Not enough actions for {difficulty.value} difficulty: "
            f"wanted {wanted}, trace has {len(trace.actions)}"
        )

    for action_id in trace.actions[:starting_index]:
        grid = apply_action_to_grid(grid, action_id, trace.color_map)

    area = len(grid) * (len(grid[0]) if grid else 0)
    state = PuzzleState(
        grid=grid,
        target_color=trace.target_color,
        locked_cells=frozenset(find_largest_region(grid)),
        loss_threshold=loss_threshold_for(area, difficulty),
        effective_starting_move_index=starting_index,
        algo_score=trace.algo_score,
        date_string=date_string,
        difficulty=difficulty,
        starting_grid=grid,
    )

    logger.info(
        f"Generated {difficulty.value} puzzle {date_string or '(undated)'}: "
        f"start index {starting_index}, goal {state.goal_score}, "
        f"loss threshold {state.loss_threshold}"
    )
    return state


def new_attempt(state: PuzzleState) -> PuzzleState:
    """
    Start a fresh attempt on the same puzzle and tier.

    Resets moves, lock and terminal flags; keeps the tier's starting grid,
    goal and loss threshold.
    """
    grid = state.starting_grid if state.starting_grid is not None else state.grid
    return replace(
        state,
        grid=grid,
        moves_used=0,
        is_solved=False,
        is_lost=False,
        locked_cells=frozenset(find_largest_region(grid)),
    )
