"""In-memory reading of DDSM raw files."""

import numpy as np
from pathlib import Path

from ..config import ConversionConfig, DEFAULT_CONFIG
from ..exceptions import CalibrationRangeError, DimensionError, ImageSizeError
from ..calibration import Digitizer
from .bytestream import decode_samples


def read_raw_image(path: str, rows: int, cols: int) -> np.ndarray:
    """
    Read a raw big-endian 16-bit image.

    Args:
        path: Path to the raw file (e.g. an LJPEG.1 file)
        rows: Image height
        cols: Image width

    Returns:
        2D numpy array with dtype uint16

    Raises:
        DimensionError: If rows or cols is not positive
        ImageSizeError: If the file does not hold rows * cols samples
    """
    if rows < 1:
        raise DimensionError('rows', rows)
    if cols < 1:
        raise DimensionError('cols', cols)

    with open(Path(path), 'rb') as f:
        samples = decode_samples(f.read())

    if samples.size != rows * cols:
        raise ImageSizeError(samples.size, rows, cols)

    return samples.reshape((rows, cols)).astype(np.uint16)


def read_calibrated_image(path: str, rows: int, cols: int, digitizer: Digitizer,
                          config: ConversionConfig = DEFAULT_CONFIG) -> np.ndarray:
    """
    Read a raw image and convert it to normalised grey levels.

    Returns:
        2D numpy array with dtype uint16

    Raises:
        CalibrationRangeError: If any pixel calibrates out of range
    """
    raw = read_raw_image(path, rows, cols).astype(np.int64)
    grey, ok = digitizer.calibrate(raw, config)

    bad = np.flatnonzero(~ok | (grey > config.max_grey_level))
    if bad.size:
        first = int(bad[0])
        raise CalibrationRangeError(first, int(raw.flat[first]), int(grey.flat[first]))

    return grey.astype(np.uint16)
