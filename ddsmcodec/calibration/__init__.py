"""Calibration modules for the DDSM raw-to-PNM converter."""

from .density import normalize_density, normalize_density_array
from .digitizers import Digitizer, DIGITIZERS, get_digitizer
from .self_check import check_calibration_functions

__all__ = [
    'normalize_density',
    'normalize_density_array',
    'Digitizer',
    'DIGITIZERS',
    'get_digitizer',
    'check_calibration_functions',
]
