"""
Debug Image Utilities

Functions for rendering boards to PNG and managing debug output.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import AbstractSet, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from colorlock.engine.board import Cell
from colorlock.engine.colors import COLOR_RGB, TileColor

logger = logging.getLogger(__name__)


# Debug settings
DEBUG_DIR = Path("./debug")
MAX_DEBUG_IMAGES = 10

CELL_SIZE = 48
GRID_LINE_COLOR = (40, 40, 40)
LOCK_OUTLINE_COLOR = (255, 255, 255)
HINT_MARKER_COLOR = (0, 0, 0)


def render_board(
    grid: Sequence[Sequence[TileColor]],
    locked_cells: Optional[AbstractSet[Cell]] = None,
    hint_cell: Optional[Tuple[int, int]] = None,
    cell_size: int = CELL_SIZE
) -> Image.Image:
    """
    Render a board as an RGB image.

    Annotations include:
    - Grid lines between tiles
    - White outline on locked tiles
    - Black dot on the hint tile

    Args:
        grid: Board to render
        locked_cells: Cells to outline (can be None)
        hint_cell: (row, col) to mark (can be None)
        cell_size: Tile size in pixels

    Returns:
        PIL Image of size (cols * cell_size, rows * cell_size)
    """
    rows = len(grid)
    cols = len(grid[0]) if rows > 0 else 0

    pixels = np.zeros((max(rows, 1) * cell_size, max(cols, 1) * cell_size, 3), dtype=np.uint8)
    for r, row in enumerate(grid):
        for c, color in enumerate(row):
            rgb = COLOR_RGB[TileColor.parse(color)]
            pixels[r * cell_size:(r + 1) * cell_size, c * cell_size:(c + 1) * cell_size] = rgb

    image = Image.fromarray(pixels)
    draw = ImageDraw.Draw(image)

    for r in range(rows + 1):
        draw.line([(0, r * cell_size), (cols * cell_size, r * cell_size)], fill=GRID_LINE_COLOR)
    for c in range(cols + 1):
        draw.line([(c * cell_size, 0), (c * cell_size, rows * cell_size)], fill=GRID_LINE_COLOR)

    for r, c in (locked_cells or ()):
        x, y = c * cell_size, r * cell_size
        draw.rectangle([x + 2, y + 2, x + cell_size - 3, y + cell_size - 3], outline=LOCK_OUTLINE_COLOR, width=2)

    if hint_cell is not None:
        r, c = hint_cell
        cx, cy = c * cell_size + cell_size // 2, r * cell_size + cell_size // 2
        radius = max(2, cell_size // 8)
        draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=HINT_MARKER_COLOR)

    return image


def save_debug_image(
    grid: Sequence[Sequence[TileColor]],
    locked_cells: Optional[AbstractSet[Cell]] = None,
    hint_cell: Optional[Tuple[int, int]] = None,
    label: str = "board",
    path: Optional[str] = None
) -> str:
    """
    Save a rendered board to the debug directory.

    Args:
        grid: Board to render
        locked_cells: Cells to outline (can be None)
        hint_cell: (row, col) to mark (can be None)
        label: Filename label, used when path is not given
        path: Output file path (default: timestamped file in DEBUG_DIR)

    Returns:
        Path of the saved image
    """
    # Ensure debug directory exists
    DEBUG_DIR.mkdir(parents=True, exist_ok=True)

    if path is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
        path = str(DEBUG_DIR / f"debug_{label}_{timestamp}.png")

    render_board(grid, locked_cells, hint_cell).save(path, "PNG")
    logger.info(f"Debug image saved: {path}")

    # Cleanup old debug images
    _cleanup_debug_images()
    return path


def _cleanup_debug_images() -> None:
    """Remove old debug images, keeping only the most recent MAX_DEBUG_IMAGES."""
    if not DEBUG_DIR.exists():
        return

    # Get all debug images sorted by modification time
    debug_files = sorted(
        DEBUG_DIR.glob("debug_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    # Remove old files
    for old_file in debug_files[MAX_DEBUG_IMAGES:]:
        try:
            old_file.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old debug image {old_file}: {e}")
