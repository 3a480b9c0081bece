"""
Board State Module - Immutable grid representation and connectivity analysis.

The connectivity functions take any rectangular sequence of rows, so they
work on BoardState grids (tuple of tuples) and on plain 2D lists alike.
None of them mutate the grid they are given.
"""

from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .colors import TileColor

Cell = Tuple[int, int]
Grid = Tuple[Tuple[TileColor, ...], ...]

# 4-directional adjacency, no diagonals
NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _dimensions(grid: Sequence[Sequence]) -> Tuple[int, int]:
    rows = len(grid)
    cols = len(grid[0]) if rows > 0 else 0
    return rows, cols


def _fill_from(
    grid: Sequence[Sequence],
    row: int,
    col: int,
    color,
    visited: List[bool],
    cols: int
) -> Set[Cell]:
    """
    Breadth-first fill from (row, col), marking cells in a flat visited array.

    Caller guarantees grid[row][col] == color and the cell is unvisited.
    """
    rows = len(grid)
    region: Set[Cell] = set()
    queue = deque([(row, col)])
    visited[row * cols + col] = True

    while queue:
        r, c = queue.popleft()
        region.add((r, c))
        for dr, dc in NEIGHBOR_OFFSETS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols:
                key = nr * cols + nc
                if not visited[key] and grid[nr][nc] == color:
                    visited[key] = True
                    queue.append((nr, nc))

    return region


def flood_fill(grid: Sequence[Sequence], row: int, col: int, color) -> Set[Cell]:
    """
    Find the 4-connected region of `color` containing (row, col).

    Args:
        grid: Rectangular grid of colors
        row: Start row
        col: Start column
        color: Color the region must have

    Returns:
        Set of (row, col) cells. Empty if the start cell is out of bounds
        or does not have `color`.
    """
    rows, cols = _dimensions(grid)
    if not (0 <= row < rows and 0 <= col < cols):
        return set()
    if grid[row][col] != color:
        return set()

    visited = [False] * (rows * cols)
    return _fill_from(grid, row, col, color, visited, cols)


def iter_regions(grid: Sequence[Sequence]) -> Iterable[Set[Cell]]:
    """
    Yield every maximal same-color region, in row-major order of first cell.

    Args:
        grid: Rectangular grid of colors
    """
    rows, cols = _dimensions(grid)
    visited = [False] * (rows * cols)

    for r in range(rows):
        for c in range(cols):
            if not visited[r * cols + c]:
                yield _fill_from(grid, r, c, grid[r][c], visited, cols)


def find_largest_region(grid: Sequence[Sequence]) -> Set[Cell]:
    """
    Find the largest same-color 4-connected region on the board.

    On ties the region found first in a row-major scan wins. Callers
    must not rely on which of several equal regions is returned.

    Args:
        grid: Rectangular grid of colors

    Returns:
        Set of (row, col) cells, empty for an empty grid
    """
    largest: Set[Cell] = set()
    for region in iter_regions(grid):
        if len(region) > len(largest):
            largest = region
    return largest


def is_board_unified(grid: Sequence[Sequence]) -> bool:
    """
    Check whether every cell has the same color as the first cell.

    Vacuously true for an empty grid or a grid of empty rows.
    """
    if not grid or not grid[0]:
        return True
    first = grid[0][0]
    return all(cell == first for row in grid for cell in row)


def recolor(grid: Sequence[Sequence], cells: Iterable[Cell], color: TileColor) -> Grid:
    """
    Build a new immutable grid with `cells` set to `color`.

    The input grid is copied, never modified.
    """
    new_grid = [list(row) for row in grid]
    for r, c in cells:
        new_grid[r][c] = color
    return tuple(tuple(row) for row in new_grid)


def freeze_grid(grid: Sequence[Sequence]) -> Grid:
    """Convert any 2D sequence of colors to an immutable tuple grid."""
    return tuple(tuple(TileColor.parse(cell) for cell in row) for row in grid)


@dataclass(frozen=True)
class BoardState:
    """
    Immutable board state representation.

    Uses tuple-of-tuples for hashability and immutability.

    Attributes:
        grid: Tuple of tuples of TileColor
    """
    grid: Grid

    @classmethod
    def from_2d_list(cls, grid: List[List]) -> 'BoardState':
        """
        Create BoardState from a 2D list of colors or color strings.

        Args:
            grid: 2D list of TileColor values or their string values

        Returns:
            BoardState instance with immutable grid
        """
        return cls(grid=freeze_grid(grid))

    @classmethod
    def from_grid(cls, grid: Grid) -> 'BoardState':
        """Create BoardState from an existing tuple grid."""
        return cls(grid=grid)

    def diff(self, other: 'BoardState') -> List[Cell]:
        """
        Find cells that differ between this board and another.

        Args:
            other: Another BoardState to compare against

        Returns:
            List of (row, col) tuples where cells differ
        """
        if not isinstance(other, BoardState):
            raise TypeError("Can only diff against another BoardState")

        differences = []
        for r in range(self.rows):
            for c in range(self.cols):
                if self.grid[r][c] != other.get_cell(r, c):
                    differences.append((r, c))

        return differences

    def get_cell(self, row: int, col: int) -> Optional[TileColor]:
        """
        Get color at a specific cell position.

        Returns:
            Cell color, or None if out of bounds
        """
        if 0 <= row < len(self.grid) and 0 <= col < len(self.grid[row]):
            return self.grid[row][col]
        return None

    def region_at(self, row: int, col: int) -> Set[Cell]:
        """Region containing (row, col), empty if out of bounds."""
        color = self.get_cell(row, col)
        if color is None:
            return set()
        return flood_fill(self.grid, row, col, color)

    def largest_region(self) -> Set[Cell]:
        return find_largest_region(self.grid)

    def is_unified(self) -> bool:
        return is_board_unified(self.grid)

    @property
    def rows(self) -> int:
        """Get number of rows in board."""
        return len(self.grid)

    @property
    def cols(self) -> int:
        """Get number of columns in board."""
        return len(self.grid[0]) if self.rows > 0 else 0

    @property
    def area(self) -> int:
        """Total number of cells."""
        return self.rows * self.cols

    def to_list(self) -> List[List[TileColor]]:
        """
        Convert to mutable 2D list representation.

        Returns:
            2D list representation of the board
        """
        return [list(row) for row in self.grid]
