"""Exhaustive range check of the calibration functions."""

import numpy as np
from typing import Iterable, Optional

from ..config import ConversionConfig, DEFAULT_CONFIG
from ..exceptions import CalibrationCheckError
from .digitizers import DIGITIZERS, Digitizer


def check_calibration_functions(digitizers: Optional[Iterable[Digitizer]] = None,
                                config: ConversionConfig = DEFAULT_CONFIG) -> None:
    """
    Run every calibration function over the whole raw domain.

    A grey level above max_grey, or a value the normaliser flagged as out
    of range, means the calibration constants are broken. This does not
    depend on the input file, so it runs before any file is opened.

    Args:
        digitizers: Digitizers to check (default: all of DIGITIZERS)
        config: Conversion settings

    Raises:
        CalibrationCheckError: On the first out-of-range output
    """
    if digitizers is None:
        digitizers = DIGITIZERS.values()

    max_grey = config.max_grey_level
    raw = np.arange(max_grey + 1, dtype=np.int64)

    for digitizer in digitizers:
        grey, ok = digitizer.calibrate(raw, config)
        bad = np.flatnonzero(~ok | (grey > max_grey))
        if bad.size:
            first = int(bad[0])
            raise CalibrationCheckError(digitizer.name, first, int(grey[first]))
