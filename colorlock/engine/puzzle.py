"""
Puzzle Module - Puzzle state and the lock/win/loss state machine.

PuzzleState is frozen: every transition builds a new state with a new
grid, so a caller's grid is never aliased or modified.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from .board import Cell, Grid, find_largest_region, flood_fill, is_board_unified, recolor
from .colors import TileColor
from .move import encode_move
from .trace import grid_to_keyed_rows

logger = logging.getLogger(__name__)


class DifficultyLevel(str, Enum):
    """Difficulty tiers; each selects an offset into the shared trace."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class PuzzleState:
    """
    One attempt's view of the puzzle.

    Attributes:
        grid: Current board
        target_color: Color the whole board must reach to win
        moves_used: Scored moves made this attempt
        is_solved: Board unified in the target color
        is_lost: Puzzle can no longer be won
        locked_cells: The sticky, never-shrinking locked region
        loss_threshold: Locked size at which a wrong-color lock loses
        effective_starting_move_index: Trace moves pre-applied for the tier
        algo_score: Optimal move count for the full puzzle
        date_string: Puzzle identifier, not used by any rule
        difficulty: Tier this state was generated for
        starting_grid: Grid the attempt started from
    """
    grid: Grid
    target_color: TileColor
    moves_used: int = 0
    is_solved: bool = False
    is_lost: bool = False
    locked_cells: FrozenSet[Cell] = frozenset()
    loss_threshold: int = 1
    effective_starting_move_index: int = 0
    algo_score: int = 0
    date_string: str = ""
    difficulty: Optional[DifficultyLevel] = None
    starting_grid: Optional[Grid] = None

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def board_area(self) -> int:
        """Total number of cells on the board."""
        return self.rows * self.cols

    @property
    def locked_color(self) -> Optional[TileColor]:
        """Color of the locked region, or None if nothing is locked."""
        for r, c in self.locked_cells:
            return self.grid[r][c]
        return None

    @property
    def goal_score(self) -> int:
        """Moves the optimal solver needs from this tier's starting grid."""
        return max(0, self.algo_score - self.effective_starting_move_index)

    @property
    def is_terminal(self) -> bool:
        return self.is_solved or self.is_lost

    def is_locked(self, row: int, col: int) -> bool:
        return (row, col) in self.locked_cells

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


def apply_color_change(state: PuzzleState, row: int, col: int, new_color: TileColor) -> PuzzleState:
    """
    Recolor the region at (row, col) and evaluate lock, win and loss.

    Returns the same state object when the move is a no-op: the cell already
    has `new_color`, the cell is out of bounds, `new_color` is not a palette
    color, or the state is terminal.
    Otherwise returns a new state with moves_used incremented.

    The lock only moves to the largest region when that region is strictly
    larger than the current lock, so equal-size regions never replace it.

    Terminal checks, in order:
        1. Unified in the target color -> solved, lock cleared
        2. Unified in another color -> lost
        3. Lock at or above loss_threshold in another color -> lost

    Args:
        state: Current puzzle state
        row: Selected row
        col: Selected column
        new_color: Color to paint the selected region

    Returns:
        New PuzzleState, or `state` itself for a no-op
    """
    if not state.in_bounds(row, col):
        logger.debug(f"Ignoring move outside board: ({row},{col})")
        return state
    try:
        new_color = TileColor.parse(new_color)
    except ValueError:
        logger.debug(f"Ignoring move with unknown color: {new_color!r}")
        return state
    if state.is_terminal:
        logger.debug("Ignoring move on finished puzzle")
        return state

    old_color = state.grid[row][col]
    if new_color == old_color:
        return state

    region = flood_fill(state.grid, row, col, old_color)
    new_grid = recolor(state.grid, region, new_color)

    candidate = find_largest_region(new_grid)
    locked_cells = state.locked_cells
    if len(candidate) > len(locked_cells):
        locked_cells = frozenset(candidate)

    is_solved = False
    is_lost = False
    if is_board_unified(new_grid):
        if new_grid[0][0] == state.target_color:
            is_solved = True
            locked_cells = frozenset()
        else:
            is_lost = True
    elif locked_cells and len(locked_cells) >= state.loss_threshold:
        r, c = next(iter(locked_cells))
        if new_grid[r][c] != state.target_color:
            is_lost = True

    logger.debug(
        f"Move ({row},{col}) {old_color.value}->{new_color.value}: "
        f"{len(region)} cells, locked={len(locked_cells)}, "
        f"solved={is_solved}, lost={is_lost}"
    )

    return replace(
        state,
        grid=new_grid,
        moves_used=state.moves_used + 1,
        locked_cells=locked_cells,
        is_solved=is_solved,
        is_lost=is_lost,
    )


@dataclass(frozen=True)
class MoveRecord:
    """
    Plain-data record of one scored player move.

    Attributes:
        grid_before: Board snapshot before the move
        action_id: Encoded move, or None if the color map cannot express it
    """
    grid_before: Grid
    action_id: Optional[int]


def apply_player_move(
    state: PuzzleState,
    row: int,
    col: int,
    new_color: TileColor,
    color_map: Optional[Sequence[int]] = None
) -> Tuple[PuzzleState, Optional[MoveRecord]]:
    """
    Apply a player move and produce its history record.

    Returns:
        (new_state, record). record is None when the move was a no-op.
    """
    new_state = apply_color_change(state, row, col, new_color)
    if new_state is state:
        return state, None

    record = MoveRecord(
        grid_before=state.grid,
        action_id=encode_move(row, col, new_color, state.rows, color_map),
    )
    return new_state, record


@dataclass
class AttemptHistory:
    """
    Move history of one attempt, for an external recorder to persist.

    Attributes:
        records: Player moves in order
        final_grid: Board after the last move once the attempt is terminal
    """
    records: List[MoveRecord] = field(default_factory=list)
    final_grid: Optional[Grid] = None

    def add(self, record: Optional[MoveRecord], state: PuzzleState) -> None:
        """
        Append a record and capture the final grid if `state` is terminal.

        Args:
            record: Record from apply_player_move (None is ignored)
            state: State after the move
        """
        if record is None:
            return
        self.records.append(record)
        if state.is_terminal:
            self.final_grid = state.grid

    def clear(self) -> None:
        self.records.clear()
        self.final_grid = None

    @property
    def actions(self) -> List[Optional[int]]:
        return [record.action_id for record in self.records]

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the keyed-row format used by stored traces.

        Returns:
            {"states": [...], "actions": [...]} with the final grid appended
            to states when the attempt finished
        """
        states = [grid_to_keyed_rows(record.grid_before) for record in self.records]
        if self.final_grid is not None:
            states.append(grid_to_keyed_rows(self.final_grid))
        return {"states": states, "actions": self.actions}
