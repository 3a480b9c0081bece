"""
Hints Module - Hint lookup and action analysis for the live board.

Hints come straight from the optimal trace. The scoring helpers rate any
candidate action by how much it grows the region it touches, rejecting
moves that are invalid or that would hand the player a losing lock.
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from .board import Cell, flood_fill, recolor
from .colors import PALETTE, TileColor
from .move import color_for_index, decode_action, decode_move, encode_move
from .trace import DEFAULT_BOARD_SIZE, SolutionTrace

logger = logging.getLogger(__name__)

# Score for actions that must never be suggested
INVALID_ACTION_SCORE = -999999


@dataclass(frozen=True)
class Hint:
    """
    Optimal next move taken from the trace.

    Attributes:
        row: Row of the tile to select
        col: Column of the tile to select
        color: Color to change the region to (None if unmapped)
        action_id: Trace action the hint was decoded from
        connected_cells: Region the move would recolor on the live grid
        valid: False if the action decodes outside the board or to no color
    """
    row: int
    col: int
    color: Optional[TileColor]
    action_id: int
    connected_cells: FrozenSet[Cell] = frozenset()
    valid: bool = True


def get_hint(
    trace: Optional[SolutionTrace],
    move_number: int,
    grid: Optional[Sequence[Sequence[TileColor]]] = None
) -> Optional[Hint]:
    """
    Look up the optimal move at `move_number`.

    Callers pass moves_used + effective_starting_move_index, the same index
    the replay driver uses.

    Args:
        trace: Solution trace
        move_number: Index into trace.actions
        grid: Live board used for the connected cells; defaults to the
            trace snapshot at move_number

    Returns:
        Hint, or None if there is no trace or no action at move_number
    """
    if trace is None:
        return None
    action_id = trace.get_action(move_number)
    if action_id is None:
        return None

    if grid is None:
        grid = trace.get_snapshot(move_number)
    n = len(grid) if grid else (trace.board_size or DEFAULT_BOARD_SIZE)

    row, col, color_index = decode_action(action_id, n)
    color = color_for_index(color_index, trace.color_map)
    valid = 0 <= row < n and 0 <= col < n and color is not None

    connected: FrozenSet[Cell] = frozenset()
    if valid and grid:
        connected = frozenset(flood_fill(grid, row, col, grid[row][col]))

    return Hint(
        row=row,
        col=col,
        color=color,
        action_id=action_id,
        connected_cells=connected,
        valid=valid,
    )


def get_valid_actions(
    grid: Sequence[Sequence[TileColor]],
    locked_cells: AbstractSet[Cell],
    color_map: Optional[Sequence[int]] = None
) -> List[int]:
    """
    Enumerate every action that recolors an unlocked tile to a new color.

    Args:
        grid: Current board
        locked_cells: Cells that may not be selected
        color_map: Trace color map used for encoding

    Returns:
        Action IDs in row-major, palette order
    """
    n = len(grid)
    actions = []
    for r, row in enumerate(grid):
        for c, current in enumerate(row):
            if (r, c) in locked_cells:
                continue
            for color in PALETTE:
                if color == current:
                    continue
                action_id = encode_move(r, c, color, n, color_map)
                if action_id is not None:
                    actions.append(action_id)
    return actions


def compute_action_difference(
    grid: Sequence[Sequence[TileColor]],
    locked_cells: AbstractSet[Cell],
    target_color: TileColor,
    action_id: int,
    color_map: Optional[Sequence[int]] = None,
    loss_threshold: Optional[int] = None
) -> int:
    """
    Score an action by how many cells it adds to the region it recolors.

    Args:
        grid: Current board
        locked_cells: Current lock
        target_color: Puzzle target color
        action_id: Action to score
        color_map: Trace color map
        loss_threshold: If given, actions that leave a wrong-color region
            of at least this size are rejected

    Returns:
        Size of the merged region after the move minus the size of the
        selected region before it, or INVALID_ACTION_SCORE
    """
    move = decode_move(action_id, grid, color_map)
    if move is None:
        return INVALID_ACTION_SCORE
    if (move.row, move.col) in locked_cells:
        return INVALID_ACTION_SCORE

    new_grid = recolor(grid, move.cells, move.color)
    merged = flood_fill(new_grid, move.row, move.col, move.color)

    if (
        loss_threshold is not None
        and move.color != target_color
        and len(merged) >= loss_threshold
    ):
        return INVALID_ACTION_SCORE

    return len(merged) - move.cell_count


@dataclass(frozen=True)
class LockedRegionsInfo:
    """
    Breakdown of the locked cells into connected pieces.

    Attributes:
        region_sizes: Size of each connected piece, largest first
        total_size: Number of locked cells
    """
    region_sizes: Tuple[int, ...]
    total_size: int

    @property
    def region_count(self) -> int:
        return len(self.region_sizes)


def get_locked_regions_info(
    grid: Sequence[Sequence[TileColor]],
    locked_cells: AbstractSet[Cell]
) -> LockedRegionsInfo:
    """
    Split the locked cells into 4-connected components.

    Args:
        grid: Current board, used for its dimensions
        locked_cells: Locked cells

    Returns:
        LockedRegionsInfo with component sizes sorted descending
    """
    rows = len(grid)
    cols = len(grid[0]) if rows > 0 else 0
    if not locked_cells or rows == 0 or cols == 0:
        return LockedRegionsInfo(region_sizes=(), total_size=0)

    mask = np.zeros((rows, cols), dtype=np.uint8)
    for r, c in locked_cells:
        if 0 <= r < rows and 0 <= c < cols:
            mask[r, c] = 1

    num_labels, labels = cv2.connectedComponents(mask, connectivity=4)
    # Label 0 is the unlocked background
    counts = np.bincount(labels.ravel(), minlength=num_labels)[1:]
    sizes = tuple(sorted((int(n) for n in counts if n > 0), reverse=True))

    return LockedRegionsInfo(region_sizes=sizes, total_size=int(mask.sum()))
