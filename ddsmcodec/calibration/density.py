"""Optical density to normalised grey level conversion."""

import numpy as np
from typing import Tuple

from ..config import ConversionConfig, DEFAULT_CONFIG


def normalize_density_array(density, config: ConversionConfig = DEFAULT_CONFIG
                            ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Map optical densities to normalised grey levels.

    Steps:
    1. Scale [0, max_od] onto [0, max_grey], truncating toward zero
    2. Flag values that exceeded max_grey
    3. Invert (the digitizers report high counts for low density)
    4. Quadratic companding: x -> x * x // max_grey

    Companding maps 0 to 0 and max_grey to max_grey and gives more
    precision to medium and high grey levels. The result is not clamped
    afterwards; it is bounded by its input.

    Args:
        density: Optical density value or array
        config: Conversion settings

    Returns:
        Tuple of (grey levels as int64, boolean mask of valid entries).
        Entries flagged invalid hold the overflowing scaled value.
    """
    max_grey = config.max_grey_level
    density = np.asarray(density, dtype=np.float64)

    # astype truncates toward zero
    scaled = ((max_grey / config.max_od) * density).astype(np.int64)
    ok = scaled <= max_grey

    inverted = max_grey - scaled
    grey = (inverted * inverted) // max_grey

    # Out-of-range entries report the scaled value that overflowed
    grey = np.where(ok, grey, scaled)

    return grey, ok


def normalize_density(density: float, config: ConversionConfig = DEFAULT_CONFIG
                      ) -> Tuple[int, bool]:
    """
    Scalar version of normalize_density_array.

    Returns:
        Tuple of (grey level, ok). ok is False when the density was
        above max_od.
    """
    grey, ok = normalize_density_array(density, config)
    return int(grey), bool(ok)
