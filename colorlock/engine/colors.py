"""
Colors Module - Tile palette for the Color Lock puzzle.
"""

from enum import Enum
from typing import List, Optional


class TileColor(str, Enum):
    """
    The fixed six-color tile palette.

    Declaration order is the palette order used by the action codec,
    so TileColor.RED has palette index 0 and TileColor.ORANGE index 5.
    """
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    PURPLE = "purple"
    ORANGE = "orange"

    @property
    def palette_index(self) -> int:
        """Palette index of this color."""
        return PALETTE.index(self)

    @classmethod
    def from_index(cls, index: int) -> Optional['TileColor']:
        """
        Look up a color by palette index.

        Args:
            index: Palette index (0-5)

        Returns:
            TileColor, or None if index is out of range
        """
        if 0 <= index < len(PALETTE):
            return PALETTE[index]
        return None

    @classmethod
    def parse(cls, value) -> 'TileColor':
        """
        Convert a stored color value to a TileColor.

        Accepts TileColor members and their string values (case-insensitive).

        Raises:
            ValueError: If value is not a palette color
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown tile color: {value!r}") from None


PALETTE: List[TileColor] = list(TileColor)

NUM_COLORS = len(PALETTE)

# RGB values used by the debug renderer
COLOR_RGB = {
    TileColor.RED: (229, 57, 53),
    TileColor.GREEN: (67, 160, 71),
    TileColor.BLUE: (30, 136, 229),
    TileColor.YELLOW: (253, 216, 53),
    TileColor.PURPLE: (142, 36, 170),
    TileColor.ORANGE: (251, 140, 0),
}
