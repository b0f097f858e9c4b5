"""Chain-code outlines from DDSM overlay files."""

import numpy as np
from dataclasses import dataclass, field
from scipy.ndimage import binary_fill_holes
from typing import List, Tuple

from ..exceptions import OverlayFormatError

# (row, col) step for each direction; 0 is up, then clockwise in 45 degree steps
DIRECTION_STEPS = {
    0: (-1, 0),
    1: (-1, 1),
    2: (0, 1),
    3: (1, 1),
    4: (1, 0),
    5: (1, -1),
    6: (0, -1),
    7: (-1, -1),
}

CHAIN_CODE_TERMINATOR = '#'


@dataclass
class ChainCode:
    """
    Outline stored as a start pixel plus 8-neighbour steps.

    Coordinates are 1-based, as written in the overlay files.
    """
    start_col: int
    start_row: int
    directions: List[int] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> 'ChainCode':
        """
        Parse a chain-code line such as '1351 2061 6 6 6 5 4 #'.

        Raises:
            OverlayFormatError: If the line is not terminated by '#', has
                fewer than two coordinates, or has an invalid direction
        """
        text = text.strip()
        if not text.endswith(CHAIN_CODE_TERMINATOR):
            raise OverlayFormatError('Chain codes must end in a "#" character')

        try:
            values = [int(v) for v in text[:-1].split()]
        except ValueError:
            raise OverlayFormatError(f"Non-numeric chain code: {text[:40]!r}") from None

        if len(values) < 2:
            raise OverlayFormatError("Chain code is missing its start coordinate")

        directions = values[2:]
        for d in directions:
            if d not in DIRECTION_STEPS:
                raise OverlayFormatError(f"Invalid chain code direction: {d}")

        return cls(start_col=values[0], start_row=values[1], directions=directions)

    def points(self) -> List[Tuple[int, int]]:
        """Return the 0-based (row, col) of every pixel on the outline."""
        row, col = self.start_row - 1, self.start_col - 1
        points = [(row, col)]
        for d in self.directions:
            dr, dc = DIRECTION_STEPS[d]
            row += dr
            col += dc
            points.append((row, col))
        return points

    def outline(self, shape: Tuple[int, int]) -> np.ndarray:
        """
        Rasterize the outline into a boolean image.

        Args:
            shape: (rows, cols) of the mammogram

        Raises:
            OverlayFormatError: If the outline leaves the image
        """
        rows, cols = shape
        image = np.zeros((rows, cols), dtype=bool)

        pts = np.array(self.points(), dtype=np.int64)
        inside = ((pts[:, 0] >= 0) & (pts[:, 0] < rows) &
                  (pts[:, 1] >= 0) & (pts[:, 1] < cols))
        if not inside.all():
            raise OverlayFormatError(
                f"Chain code leaves the {rows}x{cols} image"
            )

        image[pts[:, 0], pts[:, 1]] = True
        return image

    def to_mask(self, shape: Tuple[int, int]) -> np.ndarray:
        """Rasterize the outline and fill its interior."""
        return binary_fill_holes(self.outline(shape))
