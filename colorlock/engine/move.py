"""
Move Module - A single region recolor and the action ID codec.

A move is stored in solution traces as one integer:

    action_id = (N - 1 - row) * N * C + col * C + color_index

for an N x N board and a C-color palette. Rows are counted from the
bottom so the solver's coordinate system matches the stored traces.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, FrozenSet

from .board import Cell, flood_fill
from .colors import NUM_COLORS, PALETTE, TileColor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    """
    Represents one recolor of the region containing (row, col).

    Attributes:
        row: Row index of the selected tile
        col: Column index of the selected tile
        color: Color the region is changed to
        action_id: Encoded action, or None if not known
        cells: Cells of the region the move recolors, measured on the
               grid the move was decoded against
    """
    row: int
    col: int
    color: TileColor
    action_id: Optional[int] = None
    cells: FrozenSet[Cell] = frozenset()

    @property
    def cell_count(self) -> int:
        """Number of cells recolored by this move."""
        return len(self.cells)


def encode_action(row: int, col: int, color_index: int, n: int, c: int = NUM_COLORS) -> int:
    """
    Encode a (row, col, color_index) move as an action ID.

    Args:
        row: Row index (0 = top)
        col: Column index
        color_index: Palette index as stored in the trace
        n: Board size
        c: Palette size

    Returns:
        Non-negative action ID for in-range inputs
    """
    return (n - 1 - row) * n * c + col * c + color_index


def decode_action(action_id: int, n: int, c: int = NUM_COLORS) -> Tuple[int, int, int]:
    """
    Decode an action ID into (row, col, color_index).

    Pure arithmetic inverse of encode_action, no bounds checks.
    """
    row = (n - 1) - action_id // (n * c)
    remainder = action_id % (n * c)
    col = remainder // c
    color_index = remainder % c
    return row, col, color_index


def color_for_index(color_index: int, color_map: Optional[Sequence[int]] = None) -> Optional[TileColor]:
    """
    Resolve a trace color index to a concrete board color.

    color_map[color_index] is the palette position of the concrete color.
    A missing or empty map means identity.

    Note: the web client resolves the other way round
    (color_map.index(color_index)). Both agree only on maps that are their
    own inverse, such as identity or the reversed palette. Traces with any
    other map must be written for this direction.

    Returns:
        TileColor, or None if either index is out of range
    """
    if color_map:
        if not 0 <= color_index < len(color_map):
            return None
        color_index = color_map[color_index]
    return TileColor.from_index(color_index)


def index_for_color(color: TileColor, color_map: Optional[Sequence[int]] = None) -> Optional[int]:
    """
    Inverse of color_for_index.

    Returns:
        Trace color index, or None if the map has no entry for the color
    """
    palette_index = TileColor.parse(color).palette_index
    if not color_map:
        return palette_index
    for color_index, mapped in enumerate(color_map):
        if mapped == palette_index:
            return color_index
    return None


def encode_move(
    row: int,
    col: int,
    color: TileColor,
    n: int,
    color_map: Optional[Sequence[int]] = None
) -> Optional[int]:
    """
    Encode a concrete-color move using the trace's color map.

    Returns:
        Action ID, or None if the color cannot be expressed through the map
    """
    color_index = index_for_color(color, color_map)
    if color_index is None:
        return None
    return encode_action(row, col, color_index, n, len(PALETTE))


def decode_move(
    action_id: int,
    grid: Sequence[Sequence[TileColor]],
    color_map: Optional[Sequence[int]] = None
) -> Optional[Move]:
    """
    Decode an action against the live grid.

    The region is flood-filled on `grid` as it is now, not on any stored
    snapshot, so the returned cells reflect the current board.

    Args:
        action_id: Encoded action
        grid: Current board
        color_map: Trace color map (identity if None/empty)

    Returns:
        Move, or None if the action is out of bounds, maps to no color,
        or would recolor a tile to the color it already has
    """
    if not isinstance(action_id, int) or action_id < 0:
        return None

    n = len(grid)
    if n == 0:
        return None

    row, col, color_index = decode_action(action_id, n)
    if not (0 <= row < n and 0 <= col < len(grid[row])):
        logger.debug(f"Action {action_id} decodes out of bounds: ({row},{col})")
        return None

    color = color_for_index(color_index, color_map)
    if color is None:
        logger.debug(f"Action {action_id} has unmapped color index {color_index}")
        return None

    current = grid[row][col]
    if color == current:
        # Degenerate move, never replayed
        return None

    cells = frozenset(flood_fill(grid, row, col, current))
    return Move(row=row, col=col, color=color, action_id=action_id, cells=cells)
