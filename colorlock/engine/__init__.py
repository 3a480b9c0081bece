"""
Engine Package - Puzzle mechanics for the Color Lock daily puzzle.

This package holds the rules of the game: connectivity analysis, the
lock/win/loss state machine, the action codec used by stored solution
traces, difficulty-tiered puzzle generation, autocomplete, hints, and the
pluggable replay strategies used by the demonstration driver.

Public API:
    - TileColor: Six-color palette
    - BoardState: Immutable board representation
    - Move: Region recolor definition
    - PuzzleState: One attempt's state
    - SolutionTrace: Stored optimal solution
    - generate_puzzle(): Build a puzzle for a difficulty tier
    - apply_color_change(): Make a move
    - auto_complete_puzzle(): Finish a nearly-won puzzle
    - TraceReplayStrategy, FallbackStrategy: Demonstration move sources

Usage:
    from colorlock.engine import SolutionTrace, DifficultyLevel, generate_puzzle

    trace = SolutionTrace.from_dict(data)
    state = generate_puzzle(trace, DifficultyLevel.MEDIUM, "2026-02-05")

    state = apply_color_change(state, 2, 3, TileColor.BLUE)
    if should_show_autocomplete(state):
        state = auto_complete_puzzle(state)
"""

# Core data structures
from .colors import TileColor, PALETTE, NUM_COLORS
from .board import (
    BoardState,
    flood_fill,
    find_largest_region,
    is_board_unified,
    iter_regions,
    recolor,
)
from .move import Move, encode_action, decode_action, encode_move, decode_move
from .puzzle import (
    DifficultyLevel,
    PuzzleState,
    MoveRecord,
    AttemptHistory,
    apply_color_change,
    apply_player_move,
)
from .trace import SolutionTrace, grid_from_keyed_rows, grid_to_keyed_rows, is_on_optimal_path
from .generator import generate_puzzle, new_attempt, apply_action_to_grid, loss_threshold_for
from .autocomplete import AUTOCOMPLETE_SLACK, should_show_autocomplete, auto_complete_puzzle
from .hints import (
    INVALID_ACTION_SCORE,
    Hint,
    LockedRegionsInfo,
    get_hint,
    get_valid_actions,
    compute_action_difference,
    get_locked_regions_info,
)

# Strategy framework
from .context import ReplayContext
from .base import ReplayStrategy
from .strategies import TraceReplayStrategy, FallbackStrategy

__all__ = [
    # Data structures
    "TileColor",
    "PALETTE",
    "NUM_COLORS",
    "BoardState",
    "Move",
    "PuzzleState",
    "DifficultyLevel",
    "MoveRecord",
    "AttemptHistory",
    "SolutionTrace",
    "Hint",
    "LockedRegionsInfo",
    # Connectivity
    "flood_fill",
    "find_largest_region",
    "is_board_unified",
    "iter_regions",
    "recolor",
    # Codec
    "encode_action",
    "decode_action",
    "encode_move",
    "decode_move",
    # Rules
    "apply_color_change",
    "apply_player_move",
    "generate_puzzle",
    "new_attempt",
    "apply_action_to_grid",
    "loss_threshold_for",
    "AUTOCOMPLETE_SLACK",
    "should_show_autocomplete",
    "auto_complete_puzzle",
    # Trace queries
    "grid_from_keyed_rows",
    "grid_to_keyed_rows",
    "is_on_optimal_path",
    "INVALID_ACTION_SCORE",
    "get_hint",
    "get_valid_actions",
    "compute_action_difference",
    "get_locked_regions_info",
    # Strategy framework
    "ReplayContext",
    "ReplayStrategy",
    "TraceReplayStrategy",
    "FallbackStrategy",
]
