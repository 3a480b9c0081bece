"""
Color Lock - Entry Point

Loads a solution trace, generates the puzzle for a difficulty tier and
optionally autocompletes it or replays the solution on a timer.

Example:
    python main.py puzzle.json
    python main.py puzzle.json --difficulty easy --replay
    python main.py puzzle.json --autocomplete --debug
"""

import sys
import json
import logging
import argparse
from typing import Optional

from PyQt5.QtCore import QCoreApplication

from colorlock.engine import (
    DifficultyLevel,
    PuzzleState,
    SolutionTrace,
    auto_complete_puzzle,
    generate_puzzle,
    get_hint,
    get_locked_regions_info,
    should_show_autocomplete,
)
from colorlock.replay_manager import ReplayManager, ReplayStep
from colorlock.replay_worker import ReplayWorker
from colorlock.settings import load_settings
from colorlock.debug import save_debug_image


# Configure logging - output to both console and file
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
    handlers=[
        logging.StreamHandler(),  # Console output
        logging.FileHandler("colorlock.log", mode='w', encoding='utf-8')  # File output
    ]
)
logger = logging.getLogger(__name__)


class Application:
    """
    Command line controller.

    Owns the generated puzzle state and, for --replay, the worker thread
    driving the demonstration.
    """

    def __init__(self, trace_path: str, difficulty: Optional[str] = None,
                 date_string: str = "", debug_mode: bool = False):
        """
        Initialize the application.

        Args:
            trace_path: Path to the solution trace JSON file
            difficulty: Difficulty tier (overrides saved setting)
            date_string: Puzzle date label
            debug_mode: Enable debug mode via CLI (overrides saved setting)
        """
        self.trace_path = trace_path
        self.date_string = date_string
        self.trace: Optional[SolutionTrace] = None
        self.state: Optional[PuzzleState] = None
        self.worker: Optional[ReplayWorker] = None

        # Load persistent settings
        self.settings = load_settings()

        self.difficulty = DifficultyLevel(difficulty or self.settings.get("difficulty", "hard"))

        # Effective debug mode: CLI flag overrides saved setting
        self.debug_mode = debug_mode or bool(self.settings.get("debug_enabled", False))
        if self.debug_mode:
            logging.getLogger().setLevel(logging.DEBUG)

    def setup(self):
        """
        Load the trace and generate the puzzle.

        Raises:
            OSError: If the trace file cannot be read
            ValueError: If the trace is malformed
        """
        with open(self.trace_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        self.trace = SolutionTrace.from_dict(data)
        self.state = generate_puzzle(self.trace, self.difficulty, self.date_string)
        self._log_state("Starting board")

        if self.debug_mode:
            self.save_debug("start")

    def show_hint(self):
        """Log the optimal next move from the trace."""
        index = self.state.moves_used + self.state.effective_starting_move_index
        hint = get_hint(self.trace, index, self.state.grid)
        if hint is None or not hint.valid:
            logger.info("No hint available")
            return
        logger.info(
            f"Hint: recolor ({hint.row},{hint.col}) to {hint.color.value} "
            f"({len(hint.connected_cells)} cells)"
        )

    def autocomplete(self):
        """Finish the puzzle if it is eligible for autocomplete."""
        if not should_show_autocomplete(self.state):
            logger.info("Autocomplete not available for this board")
            return
        self.state = auto_complete_puzzle(self.state)
        self._log_state("After autocomplete")

    def replay(self) -> int:
        """
        Replay the solution on a timer using the Qt worker thread.

        Returns:
            Exit code of the Qt event loop
        """
        app = QCoreApplication.instance() or QCoreApplication(sys.argv)

        manager = ReplayManager(
            self.state,
            self.trace,
            strategy_name=self.settings.get("replay_strategy"),
        )
        self.worker = ReplayWorker(manager, self.settings.get("tick_interval_ms", 3000))

        # Connect worker signals
        self.worker.step_applied.connect(self._on_step)
        self.worker.phase_changed.connect(self._on_phase_changed)
        self.worker.error_occurred.connect(self._on_error)
        self.worker.finished_replay.connect(self._on_replay_finished)
        self.worker.finished.connect(app.quit)

        logger.info("Starting replay worker")
        self.worker.start()
        code = app.exec_()
        self.worker.wait()
        return code

    def _on_step(self, step: ReplayStep):
        """Handle a replay step from the worker."""
        move = step.move
        logger.info(
            f"Replay step {step.number} [{step.phase.name}]: "
            f"({move.row},{move.col}) -> {move.color.value}, {move.cell_count} cells"
        )
        if self.debug_mode:
            save_debug_image(step.state.grid, step.state.locked_cells, (move.row, move.col),
                             label=f"step{step.number:02d}")

    def _on_phase_changed(self, phase: str):
        logger.info(f"Replay phase: {phase}")

    def _on_error(self, error_msg: str):
        """Handle worker error."""
        logger.error(f"Worker error: {error_msg}")

    def _on_replay_finished(self, state: PuzzleState):
        self.state = state
        self._log_state("After replay")

    def _log_state(self, title: str):
        state = self.state
        logger.info(
            f"{title}: {state.difficulty.value if state.difficulty else '-'}, "
            f"target {state.target_color.value}, moves {state.moves_used}, "
            f"goal {state.goal_score}, solved={state.is_solved}, lost={state.is_lost}"
        )
        for r, row in enumerate(state.grid):
            cells = " ".join(
                (cell.value[0].upper() if state.is_locked(r, c) else cell.value[0])
                for c, cell in enumerate(row)
            )
            logger.info(f"  Row {r}: {cells}")

        info = get_locked_regions_info(state.grid, state.locked_cells)
        logger.debug(f"Locked regions: {list(info.region_sizes)}, total {info.total_size}")

    def save_debug(self, label: str):
        save_debug_image(self.state.grid, self.state.locked_cells, label=label)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Color Lock - Daily color puzzle engine harness"
    )
    parser.add_argument(
        "trace",
        help="Path to a solution trace JSON file"
    )
    parser.add_argument(
        "--difficulty",
        choices=[level.value for level in DifficultyLevel],
        default=None,
        help="Difficulty tier (default: saved setting, else hard)"
    )
    parser.add_argument(
        "--date",
        default="",
        help="Puzzle date label, e.g. 2026-02-05"
    )
    parser.add_argument(
        "--replay",
        action="store_true",
        help="Replay the optimal solution on a timer"
    )
    parser.add_argument(
        "--autocomplete",
        action="store_true",
        help="Autocomplete the puzzle if it is eligible"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging and save board images"
    )
    return parser.parse_args(argv)


def main():
    """Run the Color Lock harness."""
    args = parse_args()

    try:
        application = Application(
            trace_path=args.trace,
            difficulty=args.difficulty,
            date_string=args.date,
            debug_mode=args.debug,
        )
        application.setup()
    except (OSError, ValueError) as e:
        logger.error(f"Could not load puzzle from {args.trace}: {e}")
        sys.exit(1)

    application.show_hint()

    if args.autocomplete:
        application.autocomplete()

    code = 0
    if args.replay:
        code = application.replay()

    if application.debug_mode:
        application.save_debug("final")

    sys.exit(code)


if __name__ == "__main__":
    main()
