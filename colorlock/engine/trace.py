"""
Trace Module - The precomputed optimal solution supplied with each puzzle.

A trace is produced by an external solver and is trusted as-is. It holds
the grid snapshots along the optimal path, the encoded actions between
them, the color map used to encode those actions, and the optimal move
count. Two JSON layouts are accepted:

    {"startingGridSnapshots": [[["red", ...], ...], ...], ...}
    {"states": [{"0": ["red", ...], "1": [...]}, ...], ...}

The second is the keyed-row layout the puzzle store uses.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .board import Grid, freeze_grid, recolor
from .colors import NUM_COLORS, TileColor
from .move import decode_move, encode_action, decode_action

logger = logging.getLogger(__name__)

# Board size assumed when a trace has no snapshots to measure
DEFAULT_BOARD_SIZE = 5


def grid_from_keyed_rows(rows: Mapping[str, Sequence]) -> Grid:
    """
    Convert a {"0": [...], "1": [...]} grid to a tuple grid.

    Rows are ordered by their numeric key, not by mapping order.
    """
    ordered = sorted(rows.items(), key=lambda item: int(item[0]))
    return freeze_grid([row for _, row in ordered])


def grid_to_keyed_rows(grid: Sequence[Sequence[TileColor]]) -> Dict[str, List[str]]:
    """
    Convert a grid to the keyed-row layout with plain string colors.

    Each row is a fresh list, so the result shares nothing with `grid`.
    """
    return {
        str(r): [TileColor.parse(cell).value for cell in row]
        for r, row in enumerate(grid)
    }


def _parse_snapshot(snapshot: Any) -> Grid:
    if isinstance(snapshot, Mapping):
        return grid_from_keyed_rows(snapshot)
    return freeze_grid(snapshot)


@dataclass(frozen=True)
class SolutionTrace:
    """
    Immutable optimal-solution trace for one puzzle.

    Attributes:
        snapshots: Grids along the optimal path, snapshots[0] is the puzzle
        actions: Encoded actions, actions[i] leads from snapshots[i]
        color_map: Trace color index -> palette index (empty = identity)
        algo_score: Optimal move count for the full puzzle
        target_color: Color the board must be unified to
        board_size: N for the N x N board
    """
    snapshots: Tuple[Grid, ...]
    actions: Tuple[int, ...]
    target_color: TileColor
    algo_score: int = 0
    color_map: Tuple[int, ...] = ()
    board_size: int = DEFAULT_BOARD_SIZE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SolutionTrace':
        """
        Build a trace from its JSON representation.

        Args:
            data: Dict in either supported layout

        Returns:
            SolutionTrace instance

        Raises:
            ValueError: If data is missing, has no snapshots, no target
                color, an unknown color, a non-positive board size, or a
                snapshot that is not board_size x board_size
        """
        if not data:
            raise ValueError("Solution trace is required")

        raw_snapshots = data.get("startingGridSnapshots")
        if raw_snapshots is None:
            raw_snapshots = data.get("states")
        if not raw_snapshots:
            raise ValueError("Solution trace has no starting grid snapshot")

        if data.get("targetColor") is None:
            raise ValueError("Solution trace has no target color")

        snapshots = tuple(_parse_snapshot(s) for s in raw_snapshots)
        board_size = int(data.get("boardSize") or len(snapshots[0]))
        if board_size <= 0:
            raise ValueError(f"Invalid board size: {board_size}")
        for index, snapshot in enumerate(snapshots):
            if len(snapshot) != board_size or any(len(row) != board_size for row in snapshot):
                raise ValueError(
                    f"Snapshot {index} is not {board_size}x{board_size}: "
                    f"row lengths {[len(row) for row in snapshot]}"
                )

        trace = cls(
            snapshots=snapshots,
            actions=tuple(int(a) for a in (data.get("actions") or ())),
            target_color=TileColor.parse(data["targetColor"]),
            algo_score=int(data.get("algoScore") or 0),
            color_map=tuple(int(i) for i in (data.get("colorMap") or ())),
            board_size=board_size,
        )
        logger.debug(
            f"Loaded trace: {board_size}x{board_size}, {len(trace.actions)} actions, "
            f"{len(trace.snapshots)} snapshots, algoScore={trace.algo_score}"
        )
        return trace

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the keyed-row JSON layout."""
        return {
            "states": [grid_to_keyed_rows(s) for s in self.snapshots],
            "actions": list(self.actions),
            "colorMap": list(self.color_map),
            "algoScore": self.algo_score,
            "targetColor": self.target_color.value,
            "boardSize": self.board_size,
        }

    @property
    def starting_grid(self) -> Grid:
        return self.snapshots[0]

    @property
    def has_actions(self) -> bool:
        return len(self.actions) > 0

    def get_action(self, index: int) -> Optional[int]:
        """Action at `index`, or None if out of range."""
        if 0 <= index < len(self.actions):
            return self.actions[index]
        return None

    def get_snapshot(self, index: int) -> Optional[Grid]:
        """Snapshot at `index`, or None if out of range."""
        if 0 <= index < len(self.snapshots):
            return self.snapshots[index]
        return None

    def encode(self, row: int, col: int, color_index: int) -> int:
        return encode_action(row, col, color_index, self.board_size, NUM_COLORS)

    def decode(self, action_id: int) -> Tuple[int, int, int]:
        return decode_action(action_id, self.board_size, NUM_COLORS)

    def find_inconsistencies(self) -> List[int]:
        """
        Check each stored action against the snapshot after it.

        Not run at load time; traces are trusted. Intended for tooling
        that wants to audit a trace before publishing it.

        Returns:
            Indices i where decoding actions[i] on snapshots[i] does not
            produce snapshots[i + 1]
        """
        bad = []
        for i, action_id in enumerate(self.actions):
            before = self.get_snapshot(i)
            after = self.get_snapshot(i + 1)
            if before is None or after is None:
                break
            move = decode_move(action_id, before, self.color_map)
            if move is None or recolor(before, move.cells, move.color) != after:
                bad.append(i)
        return bad


def is_on_optimal_path(
    grid: Sequence[Sequence[TileColor]],
    move_number: int,
    trace: Optional[SolutionTrace]
) -> bool:
    """
    Check whether the live grid matches the trace snapshot at move_number.

    Used by external analytics to detect when a player leaves the optimal
    path. Callers offset move_number by the tier's starting index.

    Returns:
        True iff the trace has a snapshot at move_number equal to grid
    """
    if trace is None:
        return False
    expected = trace.get_snapshot(move_number)
    if expected is None:
        return False
    return freeze_grid(grid) == expected
